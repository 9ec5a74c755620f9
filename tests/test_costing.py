from __future__ import annotations

from decimal import Decimal

import pytest

from bills import costing
from bills.costing import StockPosition
from core.errors import (
    InsufficientStockError,
    NegativeStockError,
    NegativeStockValueError,
    StockLimitError,
)

D = Decimal


def position(quantity: int, stock_value: str) -> StockPosition:
    value = D(stock_value)
    average = costing.money(value / quantity) if quantity else D("0.00")
    return StockPosition(quantity=quantity, stock_value=value, average_buy_price=average)


@pytest.mark.parametrize(
    ("name", "company", "code", "expected"),
    [
        ("Brake Pad", "Bosch", "BP-01", "brake-pad-bosch-bp-01"),
        ("Oil  Filter", "Purolator", None, "oil-filter-purolator"),
        ("  Engine Oil ", "Castrol", "", "engine-oil-castrol"),
        ("Oil 5W/30", "Castrol", "EO / 1L", "oil-5w-30-castrol-eo-1l"),
    ],
)
def test_derive_unique_id(name, company, code, expected):
    assert costing.derive_unique_id(name, company, code) == expected


def test_explicit_unique_id_wins():
    assert costing.resolve_unique_id(" custom-id ", name="A", company="B") == "custom-id"
    assert costing.resolve_unique_id(None, name="A", company="B", product_code="C") == "a-b-c"


def test_first_purchase_sets_average_to_price():
    result = costing.apply_purchase(StockPosition.empty(), D("850.00"), 10)
    assert result == StockPosition(quantity=10, stock_value=D("8500.00"), average_buy_price=D("850.00"))


@pytest.mark.parametrize(
    ("old_qty", "old_value", "price", "qty"),
    [
        (10, "100.00", "20.00", 10),
        (4, "10.00", "7.00", 4),
        (3, "30.00", "0.00", 2),
        (1, "99.99", "0.01", 999),
        (250, "1250.00", "12.34", 50),
    ],
)
def test_purchase_average_is_weighted_by_cost_basis(old_qty, old_value, price, qty):
    # old_avg is the exact cost basis per unit, not the stored 2dp average.
    before = position(old_qty, old_value)
    old_avg = D(old_value) / old_qty
    expected = costing.money((old_avg * old_qty + D(price) * qty) / (old_qty + qty))

    after = costing.apply_purchase(before, D(price), qty)

    assert after.quantity == old_qty + qty
    assert after.average_buy_price == expected


@pytest.mark.parametrize(
    ("start", "price", "qty"),
    [
        (StockPosition.empty(), "850.00", 10),
        (position(10, "100.00"), "20.00", 10),
        (position(3, "10.00"), "3.33", 7),
        (position(7, "123.45"), "0.00", 1),
    ],
)
def test_reversing_a_purchase_restores_the_position_exactly(start, price, qty):
    after = costing.apply_purchase(start, D(price), qty)
    restored = costing.reverse_purchase(
        after,
        quantity=qty,
        total_cost=costing.line_total(D(price), qty),
        product_name="Widget",
    )
    assert restored == start


def test_reversal_refused_when_stock_already_sold():
    bought = costing.apply_purchase(StockPosition.empty(), D("10.00"), 5)
    line = costing.price_sale(bought, D("15.00"), 3, product_name="Widget")
    after_sale = costing.apply_sale(bought, line)

    with pytest.raises(NegativeStockError) as exc_info:
        costing.reverse_purchase(after_sale, quantity=5, total_cost=D("50.00"), product_name="Widget")

    assert "Widget" in str(exc_info.value)
    assert exc_info.value.available == 2


def test_reversal_refused_when_cost_basis_would_go_negative():
    # 10 @ 100, sell 9, then 100 @ 1: removing the first purchase would need
    # more cost than is left on the shelf.
    pos = costing.apply_purchase(StockPosition.empty(), D("100.00"), 10)
    pos = costing.apply_sale(pos, costing.price_sale(pos, D("120.00"), 9, product_name="Widget"))
    pos = costing.apply_purchase(pos, D("1.00"), 100)

    with pytest.raises(NegativeStockValueError):
        costing.reverse_purchase(pos, quantity=10, total_cost=D("1000.00"), product_name="Widget")


def test_reversal_to_zero_resets_cost():
    pos = costing.apply_purchase(StockPosition.empty(), D("10.00"), 4)
    assert costing.reverse_purchase(pos, quantity=4, total_cost=D("40.00"), product_name="W") == StockPosition.empty()


def test_sale_profit_uses_average_cost():
    pos = costing.apply_purchase(StockPosition.empty(), D("850.00"), 10)
    line = costing.price_sale(pos, D("1200.00"), 2, product_name="Brake Pad")

    assert line.average_cost == D("850.00")
    assert line.profit_per_unit == D("350.00")
    assert line.total_profit == D("700.00")
    assert line.amount == D("2400.00")
    assert line.cost_total == D("1700.00")


def test_sale_below_cost_gives_negative_profit():
    pos = position(4, "40.00")
    line = costing.price_sale(pos, D("7.50"), 2, product_name="W")
    assert line.profit_per_unit == D("-2.50")
    assert line.total_profit == D("-5.00")


@pytest.mark.parametrize(("on_hand", "requested"), [(0, 1), (2, 3), (10, 11), (1, 1000)])
def test_selling_more_than_on_hand_is_rejected(on_hand, requested):
    pos = position(on_hand, "10.00") if on_hand else StockPosition.empty()
    with pytest.raises(InsufficientStockError) as exc_info:
        costing.price_sale(pos, D("5.00"), requested, product_name="Oil Filter")

    err = exc_info.value
    assert err.shortfall == requested - on_hand
    assert "Oil Filter" in str(err)
    assert f"short by {requested - on_hand}" in str(err)


def test_selling_everything_takes_whole_cost_basis():
    pos = position(3, "10.00")
    line = costing.price_sale(pos, D("5.00"), 3, product_name="W")
    after = costing.apply_sale(pos, line)

    assert line.cost_total == D("10.00")
    assert after == StockPosition.empty()


def test_restoring_a_sale_restores_quantity_and_cost():
    pos = position(9, "100.00")
    line = costing.price_sale(pos, D("20.00"), 4, product_name="W")
    after = costing.apply_sale(pos, line)

    restored = costing.restore_sale(after, quantity=4, cost_total=line.cost_total)

    assert restored == pos


@pytest.mark.parametrize(
    ("total", "pct", "expected"),
    [("1000.00", "18", "180.00"), ("99.99", "5", "5.00"), ("100.00", None, None)],
)
def test_gst_amount(total, pct, expected):
    result = costing.gst_amount(D(total), D(pct) if pct is not None else None)
    assert result == (D(expected) if expected is not None else None)


def test_non_positive_quantity_is_a_programming_error():
    with pytest.raises(ValueError):
        costing.apply_purchase(StockPosition.empty(), D("1.00"), 0)


def test_average_follows_cost_basis_rather_than_rounded_average():
    # 2 @ 10 and 1 @ 0 store an average of 6.67 over a basis of 20.00.
    pos = costing.apply_purchase(StockPosition.empty(), D("10.00"), 2)
    pos = costing.apply_purchase(pos, D("0.00"), 1)
    assert pos.average_buy_price == D("6.67")

    after = costing.apply_purchase(pos, D("0.00"), 3)

    # 20.00 / 6, where re-using the rounded 6.67 would give 3.34.
    assert after.average_buy_price == D("3.33")
    assert costing.reverse_purchase(after, quantity=3, total_cost=D("0.00"), product_name="W") == pos


def test_reversing_a_purchase_after_selling_out():
    pos = costing.apply_purchase(StockPosition.empty(), D("10.00"), 2)
    sold_out = costing.apply_sale(pos, costing.price_sale(pos, D("12.00"), 2, product_name="W"))
    restocked = costing.apply_purchase(sold_out, D("20.00"), 3)

    restored = costing.reverse_purchase(restocked, quantity=3, total_cost=D("60.00"), product_name="W")

    assert restored == sold_out


def test_restoring_a_sale_that_emptied_the_shelf():
    pos = position(3, "10.00")
    line = costing.price_sale(pos, D("5.00"), 3, product_name="W")
    sold_out = costing.apply_sale(pos, line)

    assert costing.restore_sale(sold_out, quantity=3, cost_total=line.cost_total) == pos


@pytest.mark.parametrize(
    ("start", "price", "qty"),
    [
        (position(1, "999999999999.00"), "1.00", 1),
        (position(costing.MAX_STOCK_QUANTITY, "10.00"), "0.00", 1),
    ],
)
def test_purchase_beyond_stock_limits_is_rejected(start, price, qty):
    with pytest.raises(StockLimitError) as exc_info:
        costing.apply_purchase(start, D(price), qty, product_name="Engine Oil")
    assert "Engine Oil" in str(exc_info.value)
