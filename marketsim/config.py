"""Configuration constants for the market simulator."""

from dataclasses import dataclass
from enum import Enum


class Command(Enum):
    """Commands accepted by the interactive menu."""

    VIEW = "v"
    ALL = "a"
    PORTFOLIO = "p"
    BUY = "b"
    SELL = "s"
    UPDATE = "u"
    QUIT = "q"


@dataclass(frozen=True)
class MarketsimConfig:
    """Configuration for the market and portfolio files."""

    TICKER_LENGTH: int = 4
    FRACTION_DIGITS: int = 6
    DEFAULT_MARKET_FILE: str = "market.txt"
    DEFAULT_PORTFOLIO_FILE: str = "portfolio.txt"


DEFAULT_CONFIG = MarketsimConfig()
