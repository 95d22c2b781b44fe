"""Abstract interface for option chain providers."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional


class ChainProvider(ABC):
    """Abstract base class for option chain data providers."""

    @abstractmethod
    async def get_option_chain(
        self,
        symbol: str,
        access_token: str,
        reference_time: datetime
    ) -> dict:
        """
        Fetch the raw option chain payload for a symbol.

        Args:
            symbol: Stock ticker symbol
            access_token: Bearer token issued by the broker
            reference_time: "Now" used to build the requested date range

        Returns:
            Raw chain response as decoded JSON

        Raises:
            ProviderError: If API call fails
        """
        pass


class ProviderError(Exception):
    """Exception raised when provider API fails.

    ``status_code`` is the upstream HTTP status when the broker answered with
    a non-2xx response, and ``None`` for transport or decoding failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details if details is not None else message
