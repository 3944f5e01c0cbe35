"""
Marketsim - A single-user stock-trading simulator backed by plain text files.

Exports:
    Stock: Dataclass representing a tradable instrument
    Share: Dataclass representing a portfolio holding
    Trade: Dataclass representing a completed buy or sell
    Market: Collection of stocks keyed by ticker
    Portfolio: Cash balance plus share holdings
    buy, sell: Validated trades between a market and a portfolio
    MarketsimError, ValidationError, LoadError, TradeError, TradeFailure: Errors
"""

from .errors import LoadError, MarketsimError, TradeError, TradeFailure, ValidationError
from .models import Share, Stock, Trade, make_ticker
from .market import Market
from .portfolio import Portfolio
from .trading import buy, sell

__all__ = [
    "Stock",
    "Share",
    "Trade",
    "make_ticker",
    "Market",
    "Portfolio",
    "buy",
    "sell",
    "MarketsimError",
    "ValidationError",
    "LoadError",
    "TradeError",
    "TradeFailure",
]
