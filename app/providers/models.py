"""Data models for ranked option chain snapshots."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class OptionType(str, Enum):
    """Option contract side, serialized as the dashboard label."""
    CALL = "Call"
    PUT = "Put"


CALL = OptionType.CALL
PUT = OptionType.PUT


@dataclass
class NormalizedOption:
    """Single display-ready option contract."""
    type: OptionType
    strike: float
    price: float
    open_interest: int
    expiry: str  # "M/D", or "N/A" if the expiration key was unparseable
    expiry_date: Optional[date]
    implied_volatility: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the dashboard; the parsed expiry date stays internal."""
        return {
            "type": OptionType(self.type).value,
            "strike": self.strike,
            "price": self.price,
            "openInterest": self.open_interest,
            "expiry": self.expiry,
            "impliedVolatility": self.implied_volatility,
        }


@dataclass
class Underlying:
    """Underlying instrument the chain was ranked against."""
    symbol: str
    price: float


@dataclass
class ChainResult:
    """Top calls and puts for one symbol."""
    underlying: Underlying
    calls: List[NormalizedOption] = field(default_factory=list)
    puts: List[NormalizedOption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calls": [c.to_dict() for c in self.calls],
            "puts": [p.to_dict() for p in self.puts],
            "underlying": {
                "symbol": self.underlying.symbol,
                "price": self.underlying.price,
            },
        }
