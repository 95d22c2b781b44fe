"""Unit tests for Time Utils.

This module tests expiration key parsing, expiry labels and the date
windows used for filtering and fetching.
"""
import pytest
from datetime import date, datetime
import pytz

from app.utils.time import (
    parse_expiration_date,
    format_expiry,
    expiry_window,
    fetch_date_range,
    get_market_time,
    to_calendar_date
)


# ============================================================================
# Tests for parse_expiration_date
# ============================================================================

@pytest.mark.unit
class TestParseExpirationDate:
    """Test parse_expiration_date function."""

    def test_with_dte_suffix(self):
        """✅ Suffix after the colon is ignored."""
        assert parse_expiration_date("2025-01-17:11") == date(2025, 1, 17)

    def test_without_suffix(self):
        """✅ Plain ISO date."""
        assert parse_expiration_date("2025-03-21") == date(2025, 3, 21)

    def test_malformed(self):
        """✅ Garbage → None."""
        assert parse_expiration_date("next friday:3") is None
        assert parse_expiration_date("2025-02-30:1") is None
        assert parse_expiration_date("") is None

    def test_non_string(self):
        """✅ Non-string key → None."""
        assert parse_expiration_date(None) is None


# ============================================================================
# Tests for format_expiry
# ============================================================================

@pytest.mark.unit
class TestFormatExpiry:
    """Test format_expiry function."""

    def test_month_day_without_padding(self):
        """✅ 2025-01-07 → 1/7."""
        assert format_expiry("2025-01-07:1") == "1/7"

    def test_double_digits(self):
        """✅ 2025-12-19 → 12/19."""
        assert format_expiry("2025-12-19") == "12/19"

    def test_unparseable(self):
        """✅ Unparseable → N/A."""
        assert format_expiry("bogus") == "N/A"


# ============================================================================
# Tests for windows
# ============================================================================

@pytest.mark.unit
class TestWindows:
    """Test expiry_window and fetch_date_range."""

    def test_expiry_window(self):
        """✅ Inclusive 21-day window from the reference date."""
        assert expiry_window(datetime(2025, 1, 6, 15, 0), 21) == (date(2025, 1, 6), date(2025, 1, 27))

    def test_window_crosses_month(self):
        """✅ Window spanning a month boundary."""
        assert expiry_window(date(2025, 1, 20), 21) == (date(2025, 1, 20), date(2025, 2, 10))

    def test_fetch_date_range(self):
        """✅ ISO strings for the upstream query."""
        assert fetch_date_range(date(2025, 1, 6), 22) == ("2025-01-06", "2025-01-28")

    def test_to_calendar_date_aware(self):
        """✅ Timezone-aware datetimes keep their local calendar date."""
        tz = pytz.timezone("America/New_York")
        aware = tz.localize(datetime(2025, 1, 6, 23, 30))
        assert to_calendar_date(aware) == date(2025, 1, 6)


# ============================================================================
# Tests for get_market_time
# ============================================================================

@pytest.mark.unit
class TestGetMarketTime:
    """Test get_market_time function."""

    def test_timezone_aware(self):
        """✅ Returns a datetime in the requested timezone."""
        now = get_market_time("America/New_York")
        assert now.tzinfo is not None
        assert now.tzinfo.zone == "America/New_York"

    def test_invalid_timezone(self):
        """✅ Unknown timezone raises."""
        with pytest.raises(pytz.UnknownTimeZoneError):
            get_market_time("Not/AZone")
