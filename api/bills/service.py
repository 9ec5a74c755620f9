"""
Bill business logic.

Every mutation runs in a single database transaction:
- purchase: create/lock products, re-average cost, add stock, snapshot lines
- sale: lock products, check stock, price profit, remove stock
- deletion: reverse the stock effect of every line, then drop the bill

Bookkeeping rule violations (`core.errors.BookkeepingError`) roll the
transaction back and surface as HTTP 400.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException

from core import db, periods
from core.errors import BookkeepingError, ProductNotFoundError
from products import repository as product_repository

from . import costing, repository, schemas
from .costing import ZERO, StockPosition

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def _bad_request(exc: BookkeepingError, *, event: str) -> HTTPException:
    logger.warning("%s reason=%s", event, exc)
    return HTTPException(status_code=400, detail=str(exc))


async def create_purchase_bill(payload: schemas.CreatePurchaseBillRequest) -> dict:
    lines = []
    for item in payload.items:
        unique_id = costing.resolve_unique_id(
            item.unique_id,
            name=item.name,
            company=item.company,
            product_code=item.product_id,
        )
        if not unique_id:
            raise HTTPException(status_code=400, detail="Item needs a unique_id or a name and company.")
        lines.append((unique_id, item))

    total_amount = sum((costing.line_total(item.buy_price, item.quantity) for _, item in lines), ZERO)

    try:
        async with db.transaction() as conn:
            bill = await repository.insert_buy_bill(
                conn,
                dealer_name=_clean(payload.dealer_name),
                dealer_gst_number=_clean(payload.dealer_gst_number),
                gst_percentage=payload.gst_percentage,
                gst_amount=costing.gst_amount(total_amount, payload.gst_percentage),
                bill_date=payload.bill_date,
                total_amount=total_amount,
            )
            bill_id = int(bill["id"])

            items = []
            for unique_id, item in lines:
                product = await product_repository.get_or_create_product_for_update(
                    conn,
                    unique_id=unique_id,
                    name=item.name.strip(),
                    company=item.company.strip(),
                    product_code=_clean(item.product_id),
                )
                position = costing.apply_purchase(
                    StockPosition.from_row(product),
                    item.buy_price,
                    item.quantity,
                    product_name=str(product["name"]),
                )
                await product_repository.update_stock(conn, int(product["id"]), position)
                items.append(
                    await repository.insert_buy_bill_item(
                        conn,
                        bill_id=bill_id,
                        product_ref=int(product["id"]),
                        unique_id=unique_id,
                        buy_price=costing.money(item.buy_price),
                        quantity=item.quantity,
                        total_cost=costing.line_total(item.buy_price, item.quantity),
                    )
                )
    except BookkeepingError as exc:
        raise _bad_request(exc, event="purchase_bill_rejected") from exc

    bill["items"] = items
    logger.info(
        "purchase_bill_created bill_id=%s items=%s total_amount=%s",
        bill_id,
        len(items),
        total_amount,
    )
    return bill


async def create_sell_bill(payload: schemas.CreateSellBillRequest) -> dict:
    try:
        async with db.transaction() as conn:
            priced: list[tuple[dict, costing.SaleLine]] = []
            for item in payload.items:
                unique_id = item.unique_id.strip()
                product = await product_repository.lock_product_by_unique_id(conn, unique_id)
                if product is None:
                    raise ProductNotFoundError(unique_id)

                position = StockPosition.from_row(product)
                line = costing.price_sale(
                    position,
                    item.selling_price,
                    item.quantity,
                    product_name=str(product["name"]),
                )
                await product_repository.update_stock(
                    conn,
                    int(product["id"]),
                    costing.apply_sale(position, line),
                )
                priced.append((product, line))

            total_amount = sum((line.amount for _, line in priced), ZERO)
            total_profit = sum((line.total_profit for _, line in priced), ZERO)
            bill = await repository.insert_sell_bill(
                conn,
                customer_name=_clean(payload.customer_name),
                customer_phone=_clean(payload.customer_phone),
                customer_gst_number=_clean(payload.customer_gst_number),
                gst_percentage=payload.gst_percentage,
                gst_amount=costing.gst_amount(total_amount, payload.gst_percentage) or ZERO,
                bill_date=payload.bill_date,
                total_profit=total_profit,
                total_amount=total_amount,
            )
            bill_id = int(bill["id"])

            items = []
            for product, line in priced:
                items.append(
                    await repository.insert_sell_bill_item(
                        conn,
                        bill_id=bill_id,
                        product_ref=int(product["id"]),
                        unique_id=str(product["unique_id"]),
                        selling_price=line.selling_price,
                        quantity=line.quantity,
                        profit_per_unit=line.profit_per_unit,
                        total_profit=line.total_profit,
                        cost_total=line.cost_total,
                    )
                )
    except BookkeepingError as exc:
        raise _bad_request(exc, event="sell_bill_rejected") from exc

    bill["items"] = items
    logger.info(
        "sell_bill_created bill_id=%s items=%s total_amount=%s total_profit=%s",
        bill_id,
        len(items),
        total_amount,
        total_profit,
    )
    return bill


async def delete_purchase_bill(bill_id: int) -> dict:
    try:
        async with db.transaction() as conn:
            bill = await repository.lock_buy_bill(conn, bill_id)
            if bill is None:
                raise HTTPException(status_code=404, detail="Bill not found")

            items = await repository.list_buy_bill_items_for_update(conn, bill_id)
            for item in items:
                product = await product_repository.lock_product(conn, int(item["product_ref"]))
                if product is None:
                    raise RuntimeError(f"Product {item['product_ref']} referenced by bill {bill_id} is missing.")
                position = costing.reverse_purchase(
                    StockPosition.from_row(product),
                    quantity=int(item["quantity"]),
                    total_cost=Decimal(item["total_cost"]),
                    product_name=str(product["name"]),
                )
                await product_repository.update_stock(conn, int(product["id"]), position)

            await repository.delete_buy_bill(conn, bill_id)
    except BookkeepingError as exc:
        raise _bad_request(exc, event="purchase_bill_delete_rejected") from exc

    logger.info("purchase_bill_deleted bill_id=%s items=%s", bill_id, len(items))
    return {"message": "Bill deleted"}


async def delete_sell_bill(bill_id: int) -> dict:
    async with db.transaction() as conn:
        bill = await repository.lock_sell_bill(conn, bill_id)
        if bill is None:
            raise HTTPException(status_code=404, detail="Bill not found")

        items = await repository.list_sell_bill_items_for_update(conn, bill_id)
        for item in items:
            product = await product_repository.lock_product(conn, int(item["product_ref"]))
            if product is None:
                raise RuntimeError(f"Product {item['product_ref']} referenced by bill {bill_id} is missing.")
            position = costing.restore_sale(
                StockPosition.from_row(product),
                quantity=int(item["quantity"]),
                cost_total=Decimal(item["cost_total"]),
            )
            await product_repository.update_stock(conn, int(product["id"]), position)

        # Profit goes away with the bill rows.
        await repository.delete_sell_bill(conn, bill_id)

    logger.info("sell_bill_deleted bill_id=%s items=%s", bill_id, len(items))
    return {"message": "Bill deleted"}


async def get_purchase_bill(bill_id: int) -> dict:
    bill = await repository.get_buy_bill(bill_id)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


async def get_sell_bill(bill_id: int) -> dict:
    bill = await repository.get_sell_bill(bill_id)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


async def transactions_on(day: date) -> dict:
    return {
        "buy_bills": await repository.list_buy_bills_between(day, day),
        "sell_bills": await repository.list_sell_bills_between(day, day),
    }


async def purchase_bills_in_year(year: int) -> list[dict]:
    start, end = periods.year_bounds(year)
    return await repository.list_buy_bills_between(start, end)
