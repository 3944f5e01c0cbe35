"""Reading and writing market and portfolio files.

Market file, one instrument per line::

    AAPL 150.000000 1000.000000

Portfolio file, balance first, then one holding per line::

    1000.000000
    AAPL 5.000000

Fields are separated by whitespace and blank lines are ignored. Numbers are
written with a fixed number of fractional digits.
"""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .config import DEFAULT_CONFIG
from .errors import LoadError
from .market import Market
from .portfolio import Portfolio

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def format_decimal(value: Decimal, digits: int = DEFAULT_CONFIG.FRACTION_DIGITS) -> str:
    """Format ``value`` in fixed-point notation, e.g. ``150.000000``."""
    return f"{value:.{digits}f}"


def parse_decimal(text: str) -> Decimal:
    """Parse a finite decimal number.

    Raises:
        ValueError: If ``text`` is not a number, or is NaN or infinite.
    """
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Not a number: {text!r}") from None

    if not value.is_finite():
        logger.warning("Rejected non-finite number %r", text)
        raise ValueError(f"Number must be finite: {text!r}")

    return value


def _records(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, fields) for every non-blank line."""
    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        if fields:
            yield line_number, fields


def parse_market(lines: Iterable[str], path: Optional[str] = None) -> Market:
    """Build a market from ``<ticker> <price> <total shares>`` lines.

    Raises:
        LoadError: On the first malformed or invalid record.
    """
    market = Market()

    for line_number, fields in _records(lines):
        try:
            if len(fields) != 3:
                raise ValueError(
                    f"Expected '<ticker> <price> <total shares>', got {len(fields)} fields"
                )
            ticker, price, total_shares = fields
            market.insert(ticker, parse_decimal(price), parse_decimal(total_shares))
        except ValueError as e:
            raise LoadError(str(e), path, line_number) from e

    return market


def dump_market(market: Market) -> str:
    return "".join(
        f"{stock.ticker} {format_decimal(stock.price)} "
        f"{format_decimal(stock.total_shares)}\n"
        for stock in market
    )


def load_market(path: PathLike) -> Market:
    """Load a market file.

    Raises:
        OSError: If the file cannot be opened.
        LoadError: If any record is malformed or invalid.
    """
    with open(path, encoding="utf-8") as f:
        market = parse_market(f, str(path))

    logger.info("Loaded %d stocks from %s", len(market), path)
    return market


def save_market(market: Market, path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_market(market))

    logger.info("Saved %d stocks to %s", len(market), path)


def parse_portfolio(lines: Iterable[str], path: Optional[str] = None) -> Portfolio:
    """Build a portfolio from a balance line followed by ``<ticker> <count>`` lines.

    Holdings with a zero count are skipped.

    Raises:
        LoadError: If the balance is missing or unparsable, or on the first
            malformed or invalid holding.
    """
    records = _records(lines)

    first = next(records, None)
    if first is None:
        raise LoadError("Missing balance line", path)

    line_number, fields = first
    try:
        if len(fields) != 1:
            raise ValueError(f"Expected '<balance>', got {len(fields)} fields")
        portfolio = Portfolio(balance=parse_decimal(fields[0]))
    except ValueError as e:
        raise LoadError(str(e), path, line_number) from e

    for line_number, fields in records:
        try:
            if len(fields) != 2:
                raise ValueError(f"Expected '<ticker> <count>', got {len(fields)} fields")
            ticker, count = fields[0], parse_decimal(fields[1])
            if count == 0:
                logger.debug("Skipping empty holding %s", ticker)
                continue
            portfolio.insert_share(ticker, count)
        except ValueError as e:
            raise LoadError(str(e), path, line_number) from e

    return portfolio


def dump_portfolio(portfolio: Portfolio) -> str:
    lines = [f"{format_decimal(portfolio.balance)}\n"]
    # Zero-count holdings are written too; they are dropped on the next load.
    lines.extend(
        f"{share.ticker} {format_decimal(share.count)}\n" for share in portfolio
    )
    return "".join(lines)


def load_portfolio(path: PathLike) -> Portfolio:
    """Load a portfolio file.

    Raises:
        OSError: If the file cannot be opened.
        LoadError: If the balance or any holding is malformed or invalid.
    """
    with open(path, encoding="utf-8") as f:
        portfolio = parse_portfolio(f, str(path))

    logger.info("Loaded portfolio with %d holdings from %s", len(portfolio), path)
    return portfolio


def save_portfolio(portfolio: Portfolio, path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_portfolio(portfolio))

    logger.info("Saved portfolio with %d holdings to %s", len(portfolio), path)
