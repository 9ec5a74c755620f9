"""
Bill persistence (raw SQL).

Functions taking `conn` are the write path and expect an open transaction
(`db.transaction()`); the rest read through the shared pool.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import asyncpg

from core import db

BUY_BILL_COLUMNS = """
    id, dealer_name, dealer_gst_number, gst_percentage, gst_amount,
    bill_date, total_amount, created_at
"""

BUY_ITEM_COLUMNS = "id, bill_id, product_ref, unique_id, buy_price, quantity, total_cost"

SELL_BILL_COLUMNS = """
    id, customer_name, customer_phone, customer_gst_number, gst_percentage,
    gst_amount, bill_date, total_profit, total_amount, created_at
"""

SELL_ITEM_COLUMNS = """
    id, bill_id, product_ref, unique_id, selling_price, quantity,
    profit_per_unit, total_profit, cost_total
"""


def _attach_items(bills: list[dict[str, Any]], items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    by_bill: dict[int, list[dict[str, Any]]] = {}
    for item in items:
        by_bill.setdefault(int(item["bill_id"]), []).append(item)
    for bill in bills:
        bill["items"] = by_bill.get(int(bill["id"]), [])
    return bills


# --- purchase bills: write path ---


async def insert_buy_bill(
    conn: asyncpg.Connection,
    *,
    dealer_name: str | None,
    dealer_gst_number: str | None,
    gst_percentage: Decimal | None,
    gst_amount: Decimal | None,
    bill_date: date,
    total_amount: Decimal,
) -> dict[str, Any]:
    row = await conn.fetchrow(
        f"""
        INSERT INTO buy_bills (dealer_name, dealer_gst_number, gst_percentage, gst_amount, bill_date, total_amount)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING {BUY_BILL_COLUMNS}
        """,
        dealer_name,
        dealer_gst_number,
        gst_percentage,
        gst_amount,
        bill_date,
        total_amount,
    )
    if row is None:
        raise RuntimeError("Failed to insert purchase bill.")
    return db.row_to_dict(row)


async def insert_buy_bill_item(
    conn: asyncpg.Connection,
    *,
    bill_id: int,
    product_ref: int,
    unique_id: str,
    buy_price: Decimal,
    quantity: int,
    total_cost: Decimal,
) -> dict[str, Any]:
    row = await conn.fetchrow(
        f"""
        INSERT INTO buy_bill_items (bill_id, product_ref, unique_id, buy_price, quantity, total_cost)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING {BUY_ITEM_COLUMNS}
        """,
        bill_id,
        product_ref,
        unique_id,
        buy_price,
        quantity,
        total_cost,
    )
    if row is None:
        raise RuntimeError("Failed to insert purchase bill item.")
    return db.row_to_dict(row)


async def lock_buy_bill(conn: asyncpg.Connection, bill_id: int) -> dict[str, Any] | None:
    row = await conn.fetchrow(
        f"SELECT {BUY_BILL_COLUMNS} FROM buy_bills WHERE id = $1 FOR UPDATE",
        bill_id,
    )
    return db.row_to_dict(row) if row is not None else None


async def list_buy_bill_items_for_update(conn: asyncpg.Connection, bill_id: int) -> list[dict[str, Any]]:
    rows = await conn.fetch(
        f"""
        SELECT {BUY_ITEM_COLUMNS}
        FROM buy_bill_items
        WHERE bill_id = $1
        ORDER BY id ASC
        """,
        bill_id,
    )
    return [db.row_to_dict(r) for r in rows]


async def delete_buy_bill(conn: asyncpg.Connection, bill_id: int) -> None:
    await conn.execute("DELETE FROM buy_bill_items WHERE bill_id = $1", bill_id)
    await conn.execute("DELETE FROM buy_bills WHERE id = $1", bill_id)


# --- sell bills: write path ---


async def insert_sell_bill(
    conn: asyncpg.Connection,
    *,
    customer_name: str | None,
    customer_phone: str | None,
    customer_gst_number: str | None,
    gst_percentage: Decimal | None,
    gst_amount: Decimal,
    bill_date: date,
    total_profit: Decimal,
    total_amount: Decimal,
) -> dict[str, Any]:
    row = await conn.fetchrow(
        f"""
        INSERT INTO sell_bills (
          customer_name, customer_phone, customer_gst_number, gst_percentage,
          gst_amount, bill_date, total_profit, total_amount
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING {SELL_BILL_COLUMNS}
        """,
        customer_name,
        customer_phone,
        customer_gst_number,
        gst_percentage,
        gst_amount,
        bill_date,
        total_profit,
        total_amount,
    )
    if row is None:
        raise RuntimeError("Failed to insert sell bill.")
    return db.row_to_dict(row)


async def insert_sell_bill_item(
    conn: asyncpg.Connection,
    *,
    bill_id: int,
    product_ref: int,
    unique_id: str,
    selling_price: Decimal,
    quantity: int,
    profit_per_unit: Decimal,
    total_profit: Decimal,
    cost_total: Decimal,
) -> dict[str, Any]:
    row = await conn.fetchrow(
        f"""
        INSERT INTO sell_bill_items (
          bill_id, product_ref, unique_id, selling_price, quantity,
          profit_per_unit, total_profit, cost_total
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING {SELL_ITEM_COLUMNS}
        """,
        bill_id,
        product_ref,
        unique_id,
        selling_price,
        quantity,
        profit_per_unit,
        total_profit,
        cost_total,
    )
    if row is None:
        raise RuntimeError("Failed to insert sell bill item.")
    return db.row_to_dict(row)


async def lock_sell_bill(conn: asyncpg.Connection, bill_id: int) -> dict[str, Any] | None:
    row = await conn.fetchrow(
        f"SELECT {SELL_BILL_COLUMNS} FROM sell_bills WHERE id = $1 FOR UPDATE",
        bill_id,
    )
    return db.row_to_dict(row) if row is not None else None


async def list_sell_bill_items_for_update(conn: asyncpg.Connection, bill_id: int) -> list[dict[str, Any]]:
    rows = await conn.fetch(
        f"""
        SELECT {SELL_ITEM_COLUMNS}
        FROM sell_bill_items
        WHERE bill_id = $1
        ORDER BY id ASC
        """,
        bill_id,
    )
    return [db.row_to_dict(r) for r in rows]


async def delete_sell_bill(conn: asyncpg.Connection, bill_id: int) -> None:
    await conn.execute("DELETE FROM sell_bill_items WHERE bill_id = $1", bill_id)
    await conn.execute("DELETE FROM sell_bills WHERE id = $1", bill_id)


# --- reads ---


async def get_buy_bill(bill_id: int) -> dict[str, Any] | None:
    bill = await db.fetch_one(f"SELECT {BUY_BILL_COLUMNS} FROM buy_bills WHERE id = $1", bill_id)
    if bill is None:
        return None
    items = await db.fetch_all(
        f"SELECT {BUY_ITEM_COLUMNS} FROM buy_bill_items WHERE bill_id = $1 ORDER BY id ASC",
        bill_id,
    )
    return _attach_items([bill], items)[0]


async def get_sell_bill(bill_id: int) -> dict[str, Any] | None:
    bill = await db.fetch_one(f"SELECT {SELL_BILL_COLUMNS} FROM sell_bills WHERE id = $1", bill_id)
    if bill is None:
        return None
    items = await db.fetch_all(
        f"SELECT {SELL_ITEM_COLUMNS} FROM sell_bill_items WHERE bill_id = $1 ORDER BY id ASC",
        bill_id,
    )
    return _attach_items([bill], items)[0]


async def list_buy_bills_between(start: date, end: date) -> list[dict[str, Any]]:
    """
    Purchase bills dated within [start, end], newest first, with their items.
    """
    bills = await db.fetch_all(
        f"""
        SELECT {BUY_BILL_COLUMNS}
        FROM buy_bills
        WHERE bill_date BETWEEN $1 AND $2
        ORDER BY bill_date DESC, id DESC
        """,
        start,
        end,
    )
    if not bills:
        return []
    items = await db.fetch_all(
        f"""
        SELECT {BUY_ITEM_COLUMNS}
        FROM buy_bill_items
        WHERE bill_id = ANY($1::bigint[])
        ORDER BY id ASC
        """,
        [int(b["id"]) for b in bills],
    )
    return _attach_items(bills, items)


async def list_sell_bills_between(start: date, end: date) -> list[dict[str, Any]]:
    bills = await db.fetch_all(
        f"""
        SELECT {SELL_BILL_COLUMNS}
        FROM sell_bills
        WHERE bill_date BETWEEN $1 AND $2
        ORDER BY bill_date DESC, id DESC
        """,
        start,
        end,
    )
    if not bills:
        return []
    items = await db.fetch_all(
        f"""
        SELECT {SELL_ITEM_COLUMNS}
        FROM sell_bill_items
        WHERE bill_id = ANY($1::bigint[])
        ORDER BY id ASC
        """,
        [int(b["id"]) for b in bills],
    )
    return _attach_items(bills, items)
