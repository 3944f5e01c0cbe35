import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import ValidationError
from .models import Stock, make_ticker

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Market:
    """The set of tradable instruments, keyed by ticker.

    Re-inserting a ticker replaces the earlier record, so lookups always see
    the most recently inserted one. Iteration runs from the most recently
    inserted record to the oldest.
    """

    def __init__(self) -> None:
        self.stocks: dict[str, Stock] = {}

    def insert(self, ticker: str, price: Decimal, total_shares: Decimal) -> Stock:
        if price <= 0 or total_shares <= 0:
            raise ValidationError(
                f"Stock price/share count must be positive, got "
                f"price={price}, total shares={total_shares}"
            )

        ticker = make_ticker(ticker)
        if self.stocks.pop(ticker, None) is not None:
            logger.warning("Stock %s inserted twice; keeping the newer record", ticker)

        stock = Stock(ticker=ticker, price=price, total_shares=total_shares)
        self.stocks[ticker] = stock
        return stock

    def lookup(self, ticker: str) -> Optional[Stock]:
        return self.stocks.get(make_ticker(ticker))

    def update(self) -> None:
        """Hook for moving market prices. Prices are static, so this does nothing."""
        logger.debug("Market update requested; prices are static")

    def render(self) -> str:
        return "\n".join(str(stock) for stock in self)

    @classmethod
    def load(cls, path: PathLike) -> "Market":
        """Load a market from a text file.

        Raises:
            OSError: If the file cannot be read.
            LoadError: If any record is malformed or invalid.
        """
        from .storage import load_market

        return load_market(path)

    def save(self, path: PathLike) -> None:
        from .storage import save_market

        save_market(self, path)

    def __iter__(self) -> Iterator[Stock]:
        return reversed(self.stocks.values())

    def __len__(self) -> int:
        return len(self.stocks)

    def __contains__(self, ticker: object) -> bool:
        return isinstance(ticker, str) and make_ticker(ticker) in self.stocks

    def __repr__(self) -> str:
        return f"Market(stocks={[stock.ticker for stock in self]})"
