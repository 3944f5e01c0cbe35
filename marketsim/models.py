"""Data models for the market simulator."""

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Decimal, Inexact, localcontext
from typing import Iterator, Literal

from .config import DEFAULT_CONFIG


def make_ticker(text: str) -> str:
    """Return the canonical ticker for ``text``, truncated to the ticker width."""
    return text[: DEFAULT_CONFIG.TICKER_LENGTH]


@contextmanager
def exact_arithmetic() -> Iterator[None]:
    """Run Decimal additions and multiplications without rounding.

    Any operation that would still have to round raises ``decimal.Inexact``.
    """
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.traps[Inexact] = True
        yield


@dataclass(frozen=True)
class Stock:
    """A tradable instrument with its current price and total issued shares."""

    ticker: str
    price: Decimal
    total_shares: Decimal

    @property
    def market_cap(self) -> Decimal:
        with exact_arithmetic():
            return self.price * self.total_shares

    def __str__(self) -> str:
        return (
            f"{self.ticker:>4} -> total shares: {self.total_shares:8.2f}, "
            f"price: $ {self.price:7.2f}, cap: $ {self.market_cap:11.2f}"
        )


@dataclass
class Share:
    """A holding of one instrument in a portfolio."""

    ticker: str
    count: Decimal

    def __str__(self) -> str:
        return f"{self.ticker:>4} -> shares: {self.count:8.2f}"


@dataclass(frozen=True)
class Trade:
    """A completed buy or sell."""

    action: Literal["BUY", "SELL"]
    ticker: str
    count: Decimal
    price: Decimal

    @property
    def amount(self) -> Decimal:
        with exact_arithmetic():
            return self.price * self.count

    def __str__(self) -> str:
        verb = "Bought" if self.action == "BUY" else "Sold"
        return f"{verb} {self.count:.3f} shares of {self.ticker}."
