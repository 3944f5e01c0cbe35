import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import ValidationError
from .models import Share, make_ticker

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Portfolio:
    """A cash balance and the share holdings bought with it.

    Holdings use the same most-recent-wins rule as ``Market``. A holding whose
    count drops to zero stays in the portfolio.
    """

    def __init__(self, balance: Decimal = Decimal("0")) -> None:
        self.balance = balance
        self.holdings: dict[str, Share] = {}

    def insert_share(self, ticker: str, count: Decimal) -> Share:
        if count < 0:
            raise ValidationError(f"Share count must not be negative, got {count}")

        ticker = make_ticker(ticker)
        if self.holdings.pop(ticker, None) is not None:
            logger.warning("Holding %s inserted twice; keeping the newer record", ticker)

        share = Share(ticker=ticker, count=count)
        self.holdings[ticker] = share
        return share

    def lookup_share(self, ticker: str) -> Optional[Share]:
        return self.holdings.get(make_ticker(ticker))

    def render(self) -> str:
        lines = [f"balance: {self.balance:.6f}"]
        lines.extend(str(share) for share in self)
        return "\n".join(lines)

    @classmethod
    def load(cls, path: PathLike) -> "Portfolio":
        """Load a portfolio from a text file.

        Holdings recorded with a zero count are skipped.

        Raises:
            OSError: If the file cannot be read.
            LoadError: If the balance line or any record is malformed or invalid.
        """
        from .storage import load_portfolio

        return load_portfolio(path)

    def save(self, path: PathLike) -> None:
        from .storage import save_portfolio

        save_portfolio(self, path)

    def __iter__(self) -> Iterator[Share]:
        return reversed(self.holdings.values())

    def __len__(self) -> int:
        return len(self.holdings)

    def __repr__(self) -> str:
        return (
            f"Portfolio(balance={self.balance}, "
            f"holdings={[share.ticker for share in self]})"
        )
