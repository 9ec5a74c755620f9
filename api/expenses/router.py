"""
Expense API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from . import schemas, service

router = APIRouter(prefix="/api/expenses")


@router.get("")
async def list_expenses(month: str | None = Query(default=None, max_length=7)) -> list[dict]:
    """
    List expenses, newest first. `month` filters by YYYY-MM.
    """
    return await service.list_expenses(month)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(request: schemas.CreateExpenseRequest) -> dict:
    return await service.create_expense(request)


@router.get("/summary")
async def expense_summary(year: int | None = Query(default=None, ge=1900, le=9999)) -> dict:
    return await service.expense_summary(year)


@router.get("/{expense_id}")
async def get_expense(expense_id: int) -> dict:
    return await service.get_expense(expense_id)


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int) -> dict:
    return await service.delete_expense(expense_id)
