"""Exceptions raised by the market simulator."""

from decimal import Decimal
from enum import Enum
from typing import Optional


class MarketsimError(Exception):
    """Base class for all market simulator errors."""


class ValidationError(MarketsimError, ValueError):
    """Raised when an entry is created with an invalid price, share total or count."""


class LoadError(MarketsimError):
    """Raised when a market or portfolio file contains a bad record.

    The structure built so far is discarded; the underlying parse or validation
    error is available as ``__cause__``.
    """

    def __init__(
        self, message: str, path: Optional[str] = None, line_number: Optional[int] = None
    ) -> None:
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}:{line_number}: " if line_number else f"{path}: "
        super().__init__(f"{location}{message}")


class TradeFailure(Enum):
    """Reasons a buy or sell can be rejected."""

    NO_MARKET = "No market provided."
    NO_PORTFOLIO = "No portfolio provided."
    INVALID_COUNT = "Shares desired must be positive."
    STOCK_NOT_FOUND = "Stock not available."
    NO_SUCH_HOLDING = "No shares of that stock in portfolio available."
    INSUFFICIENT_SHARES = "Not enough shares available."
    INSUFFICIENT_FUNDS = "You can't afford that trade."


class TradeError(MarketsimError):
    """Raised when a trade fails validation. The portfolio is left untouched."""

    def __init__(
        self,
        kind: TradeFailure,
        ticker: str = "",
        count: Optional[Decimal] = None,
        message: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.ticker = ticker
        self.count = count
        super().__init__(message or kind.value)
