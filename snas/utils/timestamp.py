"""Date and timestamp utilities."""

import re
from datetime import date, datetime
from typing import Callable, Optional

# Injectable "today" provider used by scoring, statistics and cleanup
Clock = Callable[[], date]

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Days assumed for achievements with no (or an unreadable) earned date
MISSING_DATE_DAYS = 999


def today() -> date:
    """Return the current local date."""
    return date.today()


def now_exact() -> str:
    """Return the current local time as an ISO 8601 string (microsecond precision)."""
    return datetime.now().isoformat()


def parse_iso_date(value) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string (or pass through a date) into a date.

    Returns:
        date, or None if the value is empty or not a valid calendar date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not ISO_DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def days_since(date_earned, reference: Optional[date] = None) -> int:
    """
    Whole days elapsed between date_earned and reference (default: today).

    Missing or unparseable dates count as MISSING_DATE_DAYS so that no
    recency rule applies to them.
    """
    earned = parse_iso_date(date_earned)
    if earned is None:
        return MISSING_DATE_DAYS

    reference = reference or today()
    return (reference - earned).days
