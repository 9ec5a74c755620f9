"""
Calendar period helpers for reports.

All ranges are inclusive on both ends, matching SQL `BETWEEN`.
"""

from __future__ import annotations

import calendar
import re
from datetime import date

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def month_bounds(day: date) -> tuple[date, date]:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def parse_month(raw: str) -> tuple[date, date]:
    """
    "YYYY-MM" -> (first day, last day). Raises ValueError on anything else.
    """
    match = _MONTH_RE.match((raw or "").strip())
    if match is None:
        raise ValueError(f"Invalid month '{raw}'. Expected YYYY-MM.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month '{raw}'. Expected YYYY-MM.")
    return month_bounds(date(year, month, 1))


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"
