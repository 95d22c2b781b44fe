"""Time utilities for expiration parsing and market-calendar handling."""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union
import pytz


EXPIRY_NOT_AVAILABLE = "N/A"


def to_calendar_date(reference_time: Union[date, datetime]) -> date:
    """Collapse a datetime to its calendar date; dates pass through unchanged."""
    if isinstance(reference_time, datetime):
        return reference_time.date()
    return reference_time


def parse_expiration_date(exp_key: str) -> Optional[date]:
    """
    Parse a broker expiration key into a calendar date.

    Keys look like ``2025-01-17:5`` where the part after the colon is the
    days-to-expiration count. Only the date part is used.

    Args:
        exp_key: Expiration key from a chain's expiration-date map

    Returns:
        Parsed date, or None if the key is not a valid date
    """
    if not isinstance(exp_key, str):
        return None

    date_str = exp_key.split(":", 1)[0].strip()
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        return None


def format_expiry(exp_key: str) -> str:
    """
    Format an expiration key as a short "month/day" label.

    Args:
        exp_key: Expiration key, e.g. ``2025-01-17:5``

    Returns:
        Label such as ``1/17``, or ``N/A`` if the key does not parse
    """
    expiry_date = parse_expiration_date(exp_key)
    if expiry_date is None:
        return EXPIRY_NOT_AVAILABLE

    return f"{expiry_date.month}/{expiry_date.day}"


def expiry_window(reference_time: Union[date, datetime], days: int) -> Tuple[date, date]:
    """
    Inclusive calendar window of admissible expirations.

    Args:
        reference_time: "Now" for the request
        days: Window length in calendar days

    Returns:
        (first_date, last_date), both inclusive
    """
    start = to_calendar_date(reference_time)
    return start, start + timedelta(days=days)


def fetch_date_range(reference_time: Union[date, datetime], days: int) -> Tuple[str, str]:
    """ISO ``fromDate``/``toDate`` strings for the upstream chain query."""
    start, end = expiry_window(reference_time, days)
    return start.isoformat(), end.isoformat()


def get_market_time(timezone_str: str = "America/New_York") -> datetime:
    """
    Get current time in the market's timezone.

    Args:
        timezone_str: Exchange timezone (default: America/New_York)

    Returns:
        Current timezone-aware datetime
    """
    tz = pytz.timezone(timezone_str)
    return datetime.now(tz)
