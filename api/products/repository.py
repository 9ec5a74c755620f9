"""
Product persistence (raw SQL).

Read helpers use the shared pool. Stock mutations take an explicit `conn` and
must run inside `db.transaction()`; they lock the product row so concurrent
bills on the same product serialize.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

from bills.costing import StockPosition

PRODUCT_COLUMNS = """
    id, name, company, product_code, unique_id, quantity,
    stock_value, average_buy_price, created_at
"""


async def list_products() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        ORDER BY name ASC, id ASC
        """
    )


async def get_product_by_unique_id(unique_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE unique_id = $1
        """,
        unique_id,
    )


async def get_product(product_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE id = $1
        """,
        product_id,
    )


async def count_products() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM products")
    return int((row or {}).get("n", 0))


async def purchase_history(product_id: int) -> list[dict[str, Any]]:
    """
    Purchase lines for one product, newest bill first.
    """
    return await db.fetch_all(
        """
        SELECT
          b.id AS bill_id,
          b.bill_date,
          b.dealer_name,
          i.buy_price,
          i.quantity,
          i.total_cost,
          i.unique_id
        FROM buy_bill_items i
        JOIN buy_bills b ON b.id = i.bill_id
        WHERE i.product_ref = $1
        ORDER BY b.bill_date DESC, b.id DESC, i.id ASC
        """,
        product_id,
    )


async def sales_history(product_id: int) -> list[dict[str, Any]]:
    """
    Sale lines for one product, newest bill first.
    """
    return await db.fetch_all(
        """
        SELECT
          b.id AS bill_id,
          b.bill_date,
          b.customer_name,
          i.selling_price,
          i.quantity,
          i.profit_per_unit,
          i.total_profit,
          i.unique_id
        FROM sell_bill_items i
        JOIN sell_bills b ON b.id = i.bill_id
        WHERE i.product_ref = $1
        ORDER BY b.bill_date DESC, b.id DESC, i.id ASC
        """,
        product_id,
    )


async def lock_product_by_unique_id(conn: asyncpg.Connection, unique_id: str) -> dict[str, Any] | None:
    row = await conn.fetchrow(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE unique_id = $1
        FOR UPDATE
        """,
        unique_id,
    )
    return db.row_to_dict(row) if row is not None else None


async def lock_product(conn: asyncpg.Connection, product_id: int) -> dict[str, Any] | None:
    row = await conn.fetchrow(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE id = $1
        FOR UPDATE
        """,
        product_id,
    )
    return db.row_to_dict(row) if row is not None else None


async def get_or_create_product_for_update(
    conn: asyncpg.Connection,
    *,
    unique_id: str,
    name: str,
    company: str,
    product_code: str | None,
) -> dict[str, Any]:
    """
    Return the locked product row for `unique_id`, creating an empty one first
    when it does not exist yet.
    """
    await conn.execute(
        """
        INSERT INTO products (name, company, product_code, unique_id)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (unique_id) DO NOTHING
        """,
        name,
        company,
        product_code,
        unique_id,
    )
    row = await lock_product_by_unique_id(conn, unique_id)
    if row is None:
        raise RuntimeError(f"Failed to create product {unique_id}.")
    return row


async def update_stock(conn: asyncpg.Connection, product_id: int, position: StockPosition) -> None:
    await conn.execute(
        """
        UPDATE products
        SET quantity = $2,
            stock_value = $3,
            average_buy_price = $4
        WHERE id = $1
        """,
        product_id,
        position.quantity,
        position.stock_value,
        position.average_buy_price,
    )
