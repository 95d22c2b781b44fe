"""Utilities package initialization."""
from app.utils.time import (
    parse_expiration_date,
    format_expiry,
    expiry_window,
    fetch_date_range,
    get_market_time
)
from app.utils.formatting import format_open_interest, open_interest_tier, format_chain_table

__all__ = [
    "parse_expiration_date",
    "format_expiry",
    "expiry_window",
    "fetch_date_range",
    "get_market_time",
    "format_open_interest",
    "open_interest_tier",
    "format_chain_table"
]
