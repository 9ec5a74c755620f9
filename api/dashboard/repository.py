"""
Dashboard aggregation queries (read-only).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from core import db


async def sales_totals(start: date, end: date) -> dict[str, Decimal]:
    """
    Sum of sale profit and revenue for bills dated within [start, end].
    """
    row = await db.fetch_one(
        """
        SELECT
          COALESCE(sum(total_profit), 0) AS profit,
          COALESCE(sum(total_amount), 0) AS revenue
        FROM sell_bills
        WHERE bill_date BETWEEN $1 AND $2
        """,
        start,
        end,
    )
    row = row or {}
    return {
        "profit": Decimal(row.get("profit", 0)),
        "revenue": Decimal(row.get("revenue", 0)),
    }


async def monthly_sales(start: date, end: date) -> list[dict[str, Any]]:
    """
    [{"month": "YYYY-MM", "profit": Decimal, "revenue": Decimal}, ...] ascending.
    """
    return await db.fetch_all(
        """
        SELECT
          to_char(bill_date, 'YYYY-MM') AS month,
          sum(total_profit) AS profit,
          sum(total_amount) AS revenue
        FROM sell_bills
        WHERE bill_date BETWEEN $1 AND $2
        GROUP BY month
        ORDER BY month ASC
        """,
        start,
        end,
    )


async def inventory_value() -> Decimal:
    """
    Cost basis of everything currently on hand.
    """
    row = await db.fetch_one("SELECT COALESCE(sum(stock_value), 0) AS total FROM products")
    return Decimal((row or {}).get("total", 0))
