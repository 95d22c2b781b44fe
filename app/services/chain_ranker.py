"""Option chain filter and ranker.

Turns a raw broker chain payload into the bounded, sorted call and put lists
shown on the dashboard:

- calls strictly above the underlying price and at most ``strike_range`` above
- puts strictly below the underlying price and at most ``strike_range`` below
- expirations within ``[today, today + window_days]`` by calendar date
- open interest strictly greater than ``min_open_interest``
- one contract per strike (highest open interest across expirations)
- top ``max_results`` by open interest, then ordered by strike
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from app.providers.models import CALL, PUT, ChainResult, NormalizedOption, OptionType, Underlying
from app.utils.time import expiry_window, format_expiry, parse_expiration_date


logger = logging.getLogger(__name__)

STRIKE_RANGE = 20.0
MIN_OPEN_INTEREST = 50
EXPIRY_WINDOW_DAYS = 21
MAX_RESULTS = 8


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_option(
    option: Dict[str, Any],
    option_type: OptionType,
    strike: float,
    exp_key: str,
    expiry_date: Optional[date]
) -> NormalizedOption:
    """
    Build a NormalizedOption from a raw broker record.

    Missing or zero ``mark`` falls back to ``last``, then to 0. Missing or zero
    ``volatility`` becomes 0. A genuine 0 and an absent field are treated the
    same way.
    """
    price = option.get("mark") or option.get("last") or 0.0
    implied_volatility = option.get("volatility") or 0.0

    return NormalizedOption(
        type=option_type,
        strike=strike,
        price=price,
        open_interest=option["openInterest"],
        expiry=format_expiry(exp_key),
        expiry_date=expiry_date,
        implied_volatility=implied_volatility,
    )


def collect_candidates(
    exp_date_map: Optional[Dict[str, Any]],
    option_type: OptionType,
    current_price: float,
    reference_time: Union[date, datetime],
    strike_range: float = STRIKE_RANGE,
    min_open_interest: int = MIN_OPEN_INTEREST,
    window_days: int = EXPIRY_WINDOW_DAYS
) -> Dict[float, NormalizedOption]:
    """
    Filter one side of the chain and deduplicate by strike.

    Args:
        exp_date_map: ``callExpDateMap`` or ``putExpDateMap`` (may be None)
        option_type: CALL or PUT
        current_price: Underlying price
        reference_time: "Now" for the expiry window
        strike_range: Maximum distance of a strike from the underlying
        min_open_interest: Open interest must be strictly greater than this
        window_days: Expiry window length in calendar days

    Returns:
        Mapping of strike to the highest open interest candidate, in the
        order strikes were first seen
    """
    candidates: Dict[float, NormalizedOption] = {}
    if not exp_date_map:
        return candidates

    first_day, last_day = expiry_window(reference_time, window_days)
    min_strike = current_price - strike_range
    max_strike = current_price + strike_range

    for exp_key, strikes in exp_date_map.items():
        expiry_date = parse_expiration_date(exp_key)
        if expiry_date is None:
            logger.debug(f"Skipping unparseable expiration key: {exp_key!r}")
            continue
        if expiry_date < first_day or expiry_date > last_day:
            continue
        if not isinstance(strikes, dict):
            continue

        for strike_key, raw_value in strikes.items():
            try:
                strike = float(strike_key)
            except (TypeError, ValueError):
                logger.debug(f"Skipping unparseable strike {strike_key!r} in {exp_key}")
                continue
            if math.isnan(strike):
                continue

            if option_type == CALL:
                if strike <= current_price or strike > max_strike:
                    continue
            else:
                if strike >= current_price or strike < min_strike:
                    continue

            if isinstance(raw_value, list):
                option = raw_value[0] if raw_value else None
            else:
                option = raw_value
            if not isinstance(option, dict):
                continue

            open_interest = option.get("openInterest")
            if not _is_number(open_interest) or open_interest <= min_open_interest:
                continue

            existing = candidates.get(strike)
            if existing is None or open_interest > existing.open_interest:
                candidates[strike] = normalize_option(option, option_type, strike, exp_key, expiry_date)

    return candidates


def select_top(
    candidates: List[NormalizedOption],
    limit: int,
    strike_descending: bool
) -> List[NormalizedOption]:
    """Take the ``limit`` highest open interest options, then order them by strike."""
    # Stable sort: equal open interest keeps first-seen order
    by_oi = sorted(candidates, key=lambda o: o.open_interest, reverse=True)
    return sorted(by_oi[:limit], key=lambda o: o.strike, reverse=strike_descending)


def rank(
    raw: Dict[str, Any],
    symbol: str,
    reference_time: Union[date, datetime],
    strike_range: float = STRIKE_RANGE,
    min_open_interest: int = MIN_OPEN_INTEREST,
    window_days: int = EXPIRY_WINDOW_DAYS,
    max_results: int = MAX_RESULTS
) -> ChainResult:
    """
    Rank a raw option chain into display-ready calls and puts.

    Deterministic for identical ``raw``, ``symbol`` and ``reference_time``.
    Calls come back ordered by ascending strike, puts by descending strike.

    Args:
        raw: Decoded chain response from the broker
        symbol: Ticker symbol reported back in ``underlying``
        reference_time: "Now" used for the expiry window
        strike_range: Maximum strike distance from the underlying price
        min_open_interest: Exclusive open interest floor
        window_days: Expiry window length in calendar days
        max_results: Maximum options returned per side

    Returns:
        ChainResult for the symbol
    """
    current_price = raw.get("underlyingPrice") or 0.0

    calls = collect_candidates(
        raw.get("callExpDateMap"), CALL, current_price, reference_time,
        strike_range, min_open_interest, window_days
    )
    puts = collect_candidates(
        raw.get("putExpDateMap"), PUT, current_price, reference_time,
        strike_range, min_open_interest, window_days
    )

    logger.debug(
        f"{symbol}: {len(calls)} call strikes above {current_price}, "
        f"{len(puts)} put strikes below {current_price}"
    )

    return ChainResult(
        underlying=Underlying(symbol=symbol, price=current_price),
        calls=select_top(list(calls.values()), max_results, strike_descending=False),
        puts=select_top(list(puts.values()), max_results, strike_descending=True),
    )
