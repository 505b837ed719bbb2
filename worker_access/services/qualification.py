from __future__ import annotations

import re
from datetime import date, datetime, timedelta

"""Date qualification rule.

A worker loses access when they have no recent payment AND have been on board
long enough to be out of the grace window:

    (last_paid is None or last_paid < cutoff) and (hire is not None and hire < cutoff)

where cutoff = now - lookback_days. A missing or unparsable hire date never
qualifies.
"""

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_LOOKBACK_DAYS",
    "compute_cutoff",
    "parse_sheet_date",
    "qualifies",
]

DEFAULT_DATE_FORMAT = "%m/%d/%Y"  # M/D/YYYY, leading zeros optional
DEFAULT_LOOKBACK_DAYS = 60


# Leading M/D/Y with any non-digit separators and a 2 or 4 digit year.
_LENIENT_MDY = re.compile(r"^(\d{1,2})\D(\d{1,2})\D(\d{4}|\d{2})(?!\d)")


def _expand_two_digit_year(yy: int) -> int:
    # 00-68 -> 20xx, 69-99 -> 19xx
    return 2000 + yy if yy <= 68 else 1900 + yy


def compute_cutoff(now: datetime, lookback_days: int = DEFAULT_LOOKBACK_DAYS) -> datetime:
    return now - timedelta(days=lookback_days)


def parse_sheet_date(text: str | None, fmt: str = DEFAULT_DATE_FORMAT) -> date | None:
    """Parse a cell's formatted text into a date.

    With the default M/D/YYYY format the parse is lenient. Other separators
    and two-digit years are accepted, and text after the date (a time of day)
    is ignored. Other formats are matched strictly with strptime.

    Empty text, unrecognised text and impossible calendar dates all come back
    as None; a bad cell never aborts the run.

    >>> parse_sheet_date("1/5/2023")
    datetime.date(2023, 1, 5)
    >>> parse_sheet_date("2/20/2024 9:30:00")
    datetime.date(2024, 2, 20)
    >>> parse_sheet_date("2/20/24")
    datetime.date(2024, 2, 20)
    >>> parse_sheet_date("13/45/2023") is None
    True
    """
    if text is None:
        return None
    stripped = text.strip()
    if not stripped:
        return None
    if fmt != DEFAULT_DATE_FORMAT:
        try:
            return datetime.strptime(stripped, fmt).date()
        except ValueError:
            return None

    m = _LENIENT_MDY.match(stripped)
    if m is None:
        return None
    month, day, year_text = int(m.group(1)), int(m.group(2)), m.group(3)
    year = int(year_text)
    if len(year_text) == 2:
        year = _expand_two_digit_year(year)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _before(d: date, cutoff: datetime) -> bool:
    # 日付はその日の 00:00 として比較
    return datetime(d.year, d.month, d.day) < cutoff.replace(tzinfo=None)


def qualifies(last_paid: date | None, hire: date | None, cutoff: datetime) -> bool:
    paid_condition = last_paid is None or _before(last_paid, cutoff)
    hire_condition = hire is not None and _before(hire, cutoff)
    return paid_condition and hire_condition
