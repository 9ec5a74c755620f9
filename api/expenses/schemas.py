"""
Expense API schemas.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

ExpenseType = Literal["Transport", "Rent", "Electricity", "Salary", "Miscellaneous"]


class CreateExpenseRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    expense_type: ExpenseType
    expense_date: date
    description: str | None = Field(default=None, max_length=1000)
