"""Calendar-month helpers for dates and YYYY-MM period keys."""

import calendar
import re
from datetime import date
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def add_months(start: date, offset: int) -> date:
    """Advance a date by ``offset`` calendar months.

    The day of month is kept and clamped to the end of shorter months, so
    Jan 31 + 1 month is Feb 29 (or 28), never Mar 3. Chains always step from
    their own start date with an absolute offset, so a clamp in one month
    does not carry over into the next one.
    """
    return start + relativedelta(months=offset)


def month_reference(value: date) -> str:
    """Return the YYYY-MM period a date belongs to."""
    return value.isoformat()[:7]


def parse_month(month: str) -> date:
    """Parse a YYYY-MM period key into the first day of that month.

    Raises:
        ValueError: If the key is not a valid YYYY-MM month.
    """
    match = _MONTH_PATTERN.match(month or "")
    if not match:
        raise ValueError(f"Invalid period '{month}', expected YYYY-MM")
    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12:
        raise ValueError(f"Invalid period '{month}', month must be 01-12")
    return date(year, month_num, 1)


def shift_period(month: str, offset: int) -> str:
    """Move a period key forward or backward by ``offset`` months."""
    return month_reference(add_months(parse_month(month), offset))


def month_bounds(month: str) -> Tuple[date, date]:
    """Get the first and last day of a period."""
    first = parse_month(month)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def period_label(month: str) -> str:
    """Human readable label for a period, e.g. "March 2024"."""
    first = parse_month(month)
    return f"{calendar.month_name[first.month]} {first.year}"


def current_period(today: Optional[date] = None) -> str:
    """Get the period key for today (or the given day)."""
    return month_reference(today or date.today())
