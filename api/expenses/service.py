"""
Expense ledger logic.

Expenses are independent entries; dashboards subtract them from sale profit.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException

from bills.costing import money
from core import periods, settings

from . import repository, schemas

logger = logging.getLogger(__name__)


async def create_expense(payload: schemas.CreateExpenseRequest) -> dict:
    description = (payload.description or "").strip() or None
    row = await repository.insert_expense(
        amount=payload.amount,
        expense_type=payload.expense_type,
        expense_date=payload.expense_date,
        description=description,
    )
    logger.info(
        "expense_created expense_id=%s type=%s amount=%s",
        row["id"],
        payload.expense_type,
        payload.amount,
    )
    return row


async def list_expenses(month: str | None = None) -> list[dict]:
    month = (month or "").strip()
    if not month:
        return await repository.list_expenses()
    try:
        start, end = periods.parse_month(month)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return await repository.list_expenses(start=start, end=end)


async def get_expense(expense_id: int) -> dict:
    row = await repository.get_expense(expense_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return row


async def delete_expense(expense_id: int) -> dict:
    deleted = await repository.delete_expense(expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info("expense_deleted expense_id=%s", expense_id)
    return {"message": "Expense deleted"}


async def expense_summary(year: int | None = None) -> dict:
    today = settings.today()
    target_year = year or today.year
    month_start, month_end = periods.month_bounds(today)
    year_start, year_end = periods.year_bounds(target_year)

    monthly = await repository.monthly_totals(year_start, year_end)
    return {
        "year": target_year,
        "current_month_expense": money(await repository.total_between(month_start, month_end)),
        "total_yearly_expense": money(await repository.total_between(year_start, year_end)),
        "monthly_data": [
            {"date": str(row["month"]), "amount": money(row["amount"])}
            for row in monthly
        ],
    }
