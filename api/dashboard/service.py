"""
Dashboard aggregation.

Profit for any period = sale profit in the period - expenses in the period.
"""

from __future__ import annotations

from decimal import Decimal

from bills.costing import ZERO, money
from core import periods, settings
from expenses import repository as expense_repository

from . import repository


def merge_monthly(sales_rows: list[dict], expense_rows: list[dict]) -> list[dict]:
    """
    Outer-join monthly sale and expense rows on "YYYY-MM".
    """
    months: dict[str, dict[str, Decimal]] = {}

    def entry(month: str) -> dict[str, Decimal]:
        return months.setdefault(month, {"sales_profit": ZERO, "revenue": ZERO, "expense": ZERO})

    for row in sales_rows:
        bucket = entry(str(row["month"]))
        bucket["sales_profit"] = money(row["profit"] or 0)
        bucket["revenue"] = money(row["revenue"] or 0)
    for row in expense_rows:
        entry(str(row["month"]))["expense"] = money(row["amount"] or 0)

    return [
        {
            "date": month,
            "profit": bucket["sales_profit"] - bucket["expense"],
            "revenue": bucket["revenue"],
            "expense": bucket["expense"],
        }
        for month, bucket in sorted(months.items())
    ]


async def dashboard_stats(year: int | None = None) -> dict:
    today = settings.today()
    target_year = year or today.year
    month_start, month_end = periods.month_bounds(today)
    year_start, year_end = periods.year_bounds(target_year)

    month_sales = await repository.sales_totals(month_start, month_end)
    year_sales = await repository.sales_totals(year_start, year_end)
    month_expense = money(await expense_repository.total_between(month_start, month_end))
    year_expense = money(await expense_repository.total_between(year_start, year_end))

    monthly_data = merge_monthly(
        await repository.monthly_sales(year_start, year_end),
        await expense_repository.monthly_totals(year_start, year_end),
    )

    return {
        "year": target_year,
        "current_month": periods.month_key(today),
        "current_month_profit": money(month_sales["profit"]) - month_expense,
        "total_yearly_profit": money(year_sales["profit"]) - year_expense,
        "current_month_revenue": money(month_sales["revenue"]),
        "total_yearly_revenue": money(year_sales["revenue"]),
        "current_month_expense": month_expense,
        "total_yearly_expense": year_expense,
        "total_inventory_value": money(await repository.inventory_value()),
        "monthly_data": monthly_data,
    }
