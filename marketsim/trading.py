"""Buying and selling shares against a market.

Both operations validate everything before touching the portfolio, so a
rejected trade leaves the balance and holdings exactly as they were. Checks
run in a fixed order and only the first failure is reported.
"""

import logging
from decimal import Decimal
from typing import Optional

from .errors import TradeError, TradeFailure
from .market import Market
from .models import Trade, exact_arithmetic, make_ticker
from .portfolio import Portfolio

logger = logging.getLogger(__name__)

SELL_INVALID_COUNT = "Shares to sell must be positive."
SELL_NOT_LISTED = "That stock doesn't exist in the market."


def _reject(
    kind: TradeFailure, ticker: str, count: Decimal, message: Optional[str] = None
) -> TradeError:
    logger.debug("Rejected trade of %s %s: %s", count, ticker, kind.name)
    return TradeError(kind, ticker=ticker, count=count, message=message)


def _check_session(market: Optional[Market], portfolio: Optional[Portfolio]) -> None:
    if market is None:
        raise TradeError(TradeFailure.NO_MARKET)
    if portfolio is None:
        raise TradeError(TradeFailure.NO_PORTFOLIO)


def buy(
    market: Optional[Market],
    portfolio: Optional[Portfolio],
    ticker: str,
    count: Decimal,
) -> Trade:
    """Buy ``count`` shares of ``ticker`` at the market price.

    Checks, in order: market and portfolio present, count positive, stock
    listed, count within the stock's total shares, balance covers the cost.

    Returns:
        The completed trade.

    Raises:
        TradeError: If any check fails. Nothing is changed.
    """
    _check_session(market, portfolio)
    ticker = make_ticker(ticker)

    if count <= 0:
        raise _reject(TradeFailure.INVALID_COUNT, ticker, count)

    stock = market.lookup(ticker)
    if stock is None:
        raise _reject(TradeFailure.STOCK_NOT_FOUND, ticker, count)

    # Total shares caps a single purchase; it is never drawn down.
    if count > stock.total_shares:
        raise _reject(TradeFailure.INSUFFICIENT_SHARES, ticker, count)

    with exact_arithmetic():
        cost = stock.price * count
    if portfolio.balance < cost:
        raise _reject(TradeFailure.INSUFFICIENT_FUNDS, ticker, count)

    share = portfolio.lookup_share(ticker)
    with exact_arithmetic():
        if share is None:
            portfolio.insert_share(ticker, count)
        else:
            share.count += count
        portfolio.balance -= cost

    trade = Trade(action="BUY", ticker=ticker, count=count, price=stock.price)
    logger.info("%s Balance: %s", trade, portfolio.balance)
    return trade


def sell(
    market: Optional[Market],
    portfolio: Optional[Portfolio],
    ticker: str,
    count: Decimal,
) -> Trade:
    """Sell ``count`` held shares of ``ticker`` at the market price.

    The holding is checked before the market listing, the reverse of ``buy``.

    Raises:
        TradeError: If any check fails. Nothing is changed.
    """
    _check_session(market, portfolio)
    ticker = make_ticker(ticker)

    if count <= 0:
        raise _reject(TradeFailure.INVALID_COUNT, ticker, count, SELL_INVALID_COUNT)

    share = portfolio.lookup_share(ticker)
    if share is None:
        raise _reject(TradeFailure.NO_SUCH_HOLDING, ticker, count)

    stock = market.lookup(ticker)
    if stock is None:
        raise _reject(TradeFailure.STOCK_NOT_FOUND, ticker, count, SELL_NOT_LISTED)

    if count > share.count:
        raise _reject(TradeFailure.INSUFFICIENT_SHARES, ticker, count)

    with exact_arithmetic():
        share.count -= count
        portfolio.balance += stock.price * count

    trade = Trade(action="SELL", ticker=ticker, count=count, price=stock.price)
    logger.info("%s Balance: %s", trade, portfolio.balance)
    return trade
