"""
Stock costing (pure logic, no I/O).

Each product carries a stock position: units on hand, the cost basis of those
units (`stock_value`) and the running weighted-average buy price.

- purchase:  avg = (old_avg * old_qty + price * qty) / (old_qty + qty)
- reversal:  avg = (avg * qty_on_hand - line_cost) / (qty_on_hand - qty)
- sale:      profit per unit = selling price - average buy price at sale time

The average is always derived from the cost basis, so reversing a purchase
subtracts exactly what it added. Money is Decimal, rounded half-up to cents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from core.errors import (
    InsufficientStockError,
    NegativeStockError,
    NegativeStockValueError,
    StockLimitError,
)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest bill total, and largest cost basis one product may carry.
MAX_AMOUNT = Decimal("999999999999.99")
# products.quantity is a Postgres integer.
MAX_STOCK_QUANTITY = 2_147_483_647

_SEPARATOR_RE = re.compile(r"[\s/]+")


def money(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def derive_unique_id(name: str, company: str, product_code: str | None = None) -> str:
    """
    Build the business identifier for a product: name-company-code, lower-cased,
    whitespace and "/" collapsed to "-". Empty parts are skipped.
    """
    parts = [(p or "").strip() for p in (name, company, product_code)]
    joined = "-".join(p for p in parts if p)
    return _SEPARATOR_RE.sub("-", joined.lower())


def resolve_unique_id(
    explicit: str | None,
    *,
    name: str,
    company: str,
    product_code: str | None = None,
) -> str:
    explicit = (explicit or "").strip()
    if explicit:
        return explicit
    return derive_unique_id(name, company, product_code)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return money(Decimal(price) * quantity)


def gst_amount(total: Decimal, percentage: Decimal | None) -> Decimal | None:
    if percentage is None:
        return None
    return money(Decimal(total) * Decimal(percentage) / 100)


def _average(stock_value: Decimal, quantity: int) -> Decimal:
    if quantity <= 0:
        return ZERO
    return money(stock_value / quantity)


@dataclass(frozen=True)
class StockPosition:
    quantity: int
    stock_value: Decimal
    average_buy_price: Decimal

    @classmethod
    def empty(cls) -> "StockPosition":
        return cls(quantity=0, stock_value=ZERO, average_buy_price=ZERO)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "StockPosition":
        return cls(
            quantity=int(row["quantity"]),
            stock_value=money(row["stock_value"]),
            average_buy_price=money(row["average_buy_price"]),
        )


@dataclass(frozen=True)
class SaleLine:
    selling_price: Decimal
    quantity: int
    average_cost: Decimal
    profit_per_unit: Decimal
    total_profit: Decimal
    amount: Decimal
    cost_total: Decimal


def _require_positive(quantity: int) -> None:
    if quantity <= 0:
        raise ValueError(f"Quantity must be positive, got {quantity}.")


def apply_purchase(
    position: StockPosition,
    price: Decimal,
    quantity: int,
    *,
    product_name: str = "product",
) -> StockPosition:
    _require_positive(quantity)
    new_quantity = position.quantity + quantity
    new_value = position.stock_value + line_total(price, quantity)
    if new_quantity > MAX_STOCK_QUANTITY or new_value > MAX_AMOUNT:
        raise StockLimitError(product_name)
    return StockPosition(
        quantity=new_quantity,
        stock_value=new_value,
        average_buy_price=_average(new_value, new_quantity),
    )


def reverse_purchase(
    position: StockPosition,
    *,
    quantity: int,
    total_cost: Decimal,
    product_name: str,
) -> StockPosition:
    """
    Take a purchase line back out of a stock position.

    Refused when the product no longer holds the units the line added, or when
    the remaining units would be left with a negative cost basis.
    """
    _require_positive(quantity)
    remaining = position.quantity - quantity
    if remaining < 0:
        raise NegativeStockError(product_name, available=position.quantity, removing=quantity)
    if remaining == 0:
        return StockPosition.empty()

    remaining_value = position.stock_value - money(total_cost)
    if remaining_value < 0:
        raise NegativeStockValueError(product_name)
    return StockPosition(
        quantity=remaining,
        stock_value=remaining_value,
        average_buy_price=_average(remaining_value, remaining),
    )


def price_sale(
    position: StockPosition,
    selling_price: Decimal,
    quantity: int,
    *,
    product_name: str,
) -> SaleLine:
    _require_positive(quantity)
    if position.quantity < quantity:
        raise InsufficientStockError(product_name, available=position.quantity, requested=quantity)

    selling_price = money(selling_price)
    average_cost = position.average_buy_price
    profit_per_unit = selling_price - average_cost

    # Selling the last units takes the whole remaining cost basis with them.
    if quantity == position.quantity:
        cost_total = position.stock_value
    else:
        cost_total = money(position.stock_value * quantity / position.quantity)

    return SaleLine(
        selling_price=selling_price,
        quantity=quantity,
        average_cost=average_cost,
        profit_per_unit=profit_per_unit,
        total_profit=money(profit_per_unit * quantity),
        amount=line_total(selling_price, quantity),
        cost_total=cost_total,
    )


def apply_sale(position: StockPosition, line: SaleLine) -> StockPosition:
    remaining = position.quantity - line.quantity
    remaining_value = position.stock_value - line.cost_total
    if remaining == 0:
        return StockPosition.empty()
    return StockPosition(
        quantity=remaining,
        stock_value=remaining_value,
        average_buy_price=_average(remaining_value, remaining),
    )


def restore_sale(position: StockPosition, *, quantity: int, cost_total: Decimal) -> StockPosition:
    _require_positive(quantity)
    new_quantity = position.quantity + quantity
    new_value = position.stock_value + money(cost_total)
    return StockPosition(
        quantity=new_quantity,
        stock_value=new_value,
        average_buy_price=_average(new_value, new_quantity),
    )
