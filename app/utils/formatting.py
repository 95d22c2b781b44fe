"""Display formatting utilities for ranked option chains."""
from typing import Any, Dict, List, Optional


# Open interest heat tiers, highest threshold first
OI_TIERS = [
    (30000, "extreme"),
    (20000, "very_high"),
    (10000, "high"),
    (5000, "elevated"),
]


def format_open_interest(oi: Optional[int]) -> str:
    """
    Compact open interest for table display.

    Args:
        oi: Open interest count

    Returns:
        ``"1.2k"`` style string for values of 1000 and above, the plain
        number otherwise, ``"0"`` when missing
    """
    if not oi:
        return "0"

    if oi >= 1000:
        return f"{oi / 1000:.1f}k"
    return str(oi)


def open_interest_tier(oi: Optional[int]) -> str:
    """Heat tier name used to colour an open interest cell."""
    if not oi:
        return "normal"

    for threshold, tier in OI_TIERS:
        if oi >= threshold:
            return tier
    return "normal"


def _format_rows(options: List[Dict[str, Any]]) -> List[str]:
    lines = []
    for opt in options:
        lines.append(
            f"  {opt['strike']:>8.2f}  ${opt['price']:>7.2f}  "
            f"OI {format_open_interest(opt['openInterest']):>6}  "
            f"{opt['expiry']:>5}  IV {opt['impliedVolatility']:>5.1f}  "
            f"{open_interest_tier(opt['openInterest'])}"
        )
    return lines


def _total_open_interest(options: List[Dict[str, Any]]) -> int:
    return sum(opt.get("openInterest") or 0 for opt in options)


def format_chain_table(chain: Dict[str, Any]) -> str:
    """
    Format a serialized chain result as plain text.

    Args:
        chain: Output of ``ChainResult.to_dict()``

    Returns:
        Multi-line text table: symbol line, per-side open interest totals,
        then calls and puts with a heat tier tag on each row
    """
    underlying = chain.get("underlying", {})
    symbol = underlying.get("symbol", "")
    price = underlying.get("price", 0.0)

    calls = chain.get("calls", [])
    puts = chain.get("puts", [])

    lines = [
        f"{symbol} @ ${price:.2f}",
        f"Call OI {format_open_interest(_total_open_interest(calls))} | "
        f"Put OI {format_open_interest(_total_open_interest(puts))}",
        "",
        "CALLS",
    ]
    lines.extend(_format_rows(calls) if calls else ["  (none)"])

    lines.extend(["", "PUTS"])
    lines.extend(_format_rows(puts) if puts else ["  (none)"])

    return "\n".join(lines)
