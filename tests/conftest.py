"""Shared pytest fixtures for chain ranking tests."""
import os

# Required settings must exist before any app module is imported
os.environ.setdefault("SCHWAB_CLIENT_ID", "test-client-id")
os.environ.setdefault("SCHWAB_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SCHWAB_REDIRECT_URI", "https://127.0.0.1:3000/callback")

import pytest
from datetime import date, datetime
from typing import Dict, Optional


# Monday; the admissible expiry window runs through 2025-01-27
REFERENCE_DATE = date(2025, 1, 6)
REFERENCE_TIME = datetime(2025, 1, 6, 10, 30, 0)


def make_option(
    open_interest: Optional[int] = 100,
    mark: Optional[float] = 1.50,
    last: Optional[float] = 1.45,
    volatility: Optional[float] = 18.5
) -> dict:
    """Factory for a raw Schwab option record. ``None`` omits the field."""
    record = {
        "putCall": "CALL",
        "bid": 1.40,
        "ask": 1.60,
        "totalVolume": 250,
    }
    if open_interest is not None:
        record["openInterest"] = open_interest
    if mark is not None:
        record["mark"] = mark
    if last is not None:
        record["last"] = last
    if volatility is not None:
        record["volatility"] = volatility
    return record


def exp_key(expiry: date, reference: date = REFERENCE_DATE) -> str:
    """Schwab-style expiration key, e.g. ``2025-01-10:4``."""
    return f"{expiry.isoformat()}:{(expiry - reference).days}"


def create_raw_chain(
    underlying_price: Optional[float] = 100.0,
    calls: Optional[Dict[str, Dict[str, object]]] = None,
    puts: Optional[Dict[str, Dict[str, object]]] = None,
    symbol: str = "SPY"
) -> dict:
    """
    Factory for a raw chain response.

    ``calls``/``puts`` map expiration key to strike string to record. Records
    are wrapped in a single-element list like the real API unless they are
    already lists or are not dicts.
    """
    def wrap(side):
        return {
            key: {
                strike: [record] if isinstance(record, dict) else record
                for strike, record in strikes.items()
            }
            for key, strikes in side.items()
        }

    raw = {
        "symbol": symbol,
        "status": "SUCCESS",
        "isDelayed": False,
    }
    if underlying_price is not None:
        raw["underlyingPrice"] = underlying_price
    if calls is not None:
        raw["callExpDateMap"] = wrap(calls)
    if puts is not None:
        raw["putExpDateMap"] = wrap(puts)
    return raw


@pytest.fixture
def reference_time():
    """Fixed "now" for expiry window filtering."""
    return REFERENCE_TIME


@pytest.fixture
def sample_raw_chain():
    """SPY-like chain around 100 with two expirations per side and noise."""
    near = exp_key(date(2025, 1, 10))
    far = exp_key(date(2025, 1, 24))
    too_far = exp_key(date(2025, 2, 21))

    return create_raw_chain(
        underlying_price=100.0,
        calls={
            near: {
                "95.0": make_option(open_interest=5000),   # in the money
                "100.0": make_option(open_interest=4000),  # at the money
                "105.0": make_option(open_interest=60, mark=2.10),
                "110.0": make_option(open_interest=1200, mark=0.85),
                "125.0": make_option(open_interest=9000),  # beyond +20
            },
            far: {
                "105.0": make_option(open_interest=200, mark=3.40),
                "115.0": make_option(open_interest=50),    # not above 50
                "120.0": make_option(open_interest=700, mark=0.30),
            },
            too_far: {
                "110.0": make_option(open_interest=99999),
            },
        },
        puts={
            near: {
                "100.0": make_option(open_interest=4000),  # at the money
                "95.0": make_option(open_interest=800, mark=1.10),
                "85.0": make_option(open_interest=300, mark=0.40),
                "75.0": make_option(open_interest=9000),   # beyond -20
            },
            far: {
                "95.0": make_option(open_interest=900, mark=2.20),
                "90.0": make_option(open_interest=51, mark=1.05),
            },
        },
    )
