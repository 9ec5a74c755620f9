"""
Expense persistence (raw SQL).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from core import db

EXPENSE_COLUMNS = "id, amount, expense_type, description, expense_date, created_at"


async def insert_expense(
    *,
    amount: Decimal,
    expense_type: str,
    expense_date: date,
    description: str | None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO expenses (amount, expense_type, expense_date, description)
        VALUES ($1, $2, $3, $4)
        RETURNING {EXPENSE_COLUMNS}
        """,
        amount,
        expense_type,
        expense_date,
        description,
    )
    if row is None:
        raise RuntimeError("Failed to insert expense.")
    return row


async def list_expenses(*, start: date | None = None, end: date | None = None) -> list[dict[str, Any]]:
    """
    Expenses newest first, optionally limited to [start, end].
    """
    if start is None or end is None:
        return await db.fetch_all(
            f"""
            SELECT {EXPENSE_COLUMNS}
            FROM expenses
            ORDER BY expense_date DESC, id DESC
            """
        )
    return await db.fetch_all(
        f"""
        SELECT {EXPENSE_COLUMNS}
        FROM expenses
        WHERE expense_date BETWEEN $1 AND $2
        ORDER BY expense_date DESC, id DESC
        """,
        start,
        end,
    )


async def get_expense(expense_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {EXPENSE_COLUMNS} FROM expenses WHERE id = $1",
        expense_id,
    )


async def delete_expense(expense_id: int) -> bool:
    row = await db.fetch_one(
        "DELETE FROM expenses WHERE id = $1 RETURNING id",
        expense_id,
    )
    return row is not None


async def total_between(start: date, end: date) -> Decimal:
    row = await db.fetch_one(
        """
        SELECT COALESCE(sum(amount), 0) AS total
        FROM expenses
        WHERE expense_date BETWEEN $1 AND $2
        """,
        start,
        end,
    )
    return Decimal((row or {}).get("total", 0))


async def monthly_totals(start: date, end: date) -> list[dict[str, Any]]:
    """
    [{"month": "YYYY-MM", "amount": Decimal}, ...] ascending.
    """
    return await db.fetch_all(
        """
        SELECT to_char(expense_date, 'YYYY-MM') AS month, sum(amount) AS amount
        FROM expenses
        WHERE expense_date BETWEEN $1 AND $2
        GROUP BY month
        ORDER BY month ASC
        """,
        start,
        end,
    )
