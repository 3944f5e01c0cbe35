#!/usr/bin/env python3
import argparse
import logging
import sys
from decimal import Decimal
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from marketsim import (
    LoadError,
    Market,
    Portfolio,
    Stock,
    TradeError,
    buy,
    make_ticker,
    sell,
)
from marketsim.config import DEFAULT_CONFIG, Command
from marketsim.storage import parse_decimal

logger = logging.getLogger(__name__)
console = Console()

HELP_LABELS: dict[Command, str] = {
    Command.VIEW: "view a specific stock",
    Command.ALL: "view all stocks",
    Command.PORTFOLIO: "view portfolio",
    Command.BUY: "buy stock",
    Command.SELL: "sell stock",
    Command.UPDATE: "force the market to update",
    Command.QUIT: "quit",
}


def market_table(stocks: list[Stock], title: str = "Current market") -> Table:
    """Build a Rich table listing stocks with their market cap."""
    t = Table(title=title, box=box.ROUNDED, title_style="bold white")
    t.add_column("Ticker", style="cyan")
    t.add_column("Total shares", justify="right")
    t.add_column("Price", justify="right")
    t.add_column("Cap", justify="right", style="yellow")

    for stock in stocks:
        t.add_row(
            stock.ticker,
            f"{stock.total_shares:,.2f}",
            f"${stock.price:,.2f}",
            f"${stock.market_cap:,.2f}",
        )
    return t


def portfolio_table(portfolio: Portfolio) -> Table:
    """Build a Rich table showing the balance and every holding."""
    t = Table(title="Current portfolio", box=box.ROUNDED, title_style="bold white")
    t.add_column("Ticker", style="cyan")
    t.add_column("Shares", justify="right")

    for share in portfolio:
        style = "dim" if share.count == 0 else None
        t.add_row(share.ticker, f"{share.count:,.2f}", style=style)

    t.add_section()
    t.add_row("Balance", f"[bold]${portfolio.balance:,.2f}[/bold]")
    return t


def print_help() -> None:
    console.print()
    console.print("[bold]Enter a command from the list below:[/bold]")
    for command, label in HELP_LABELS.items():
        console.print(f"  [cyan]{command.value}[/cyan]) {label}")


def _read_command() -> Optional[Command]:
    text = Prompt.ask("\n>").strip()
    try:
        return Command(text[:1])
    except ValueError:
        logger.debug("Unknown command %r", text)
        return None


def _prompt_ticker(action: str) -> str:
    return make_ticker(Prompt.ask(f"  Ticker of the stock you wish to {action}").strip())


def _prompt_count(action: str) -> Optional[Decimal]:
    text = Prompt.ask(f"  Amount of shares you'd like to {action}")
    try:
        return parse_decimal(text.strip())
    except ValueError:
        console.print(f"[red]  Not a valid share amount: {escape(text)}[/red]")
        return None


def _view_stock(market: Market) -> None:
    stock = market.lookup(_prompt_ticker("view"))
    if stock is None:
        console.print("[red]  Stock not found.[/red]")
        return
    console.print(market_table([stock], title=stock.ticker))


def _trade(market: Market, portfolio: Portfolio, command: Command) -> None:
    action, operation = ("purchase", buy) if command is Command.BUY else ("sell", sell)

    ticker = _prompt_ticker(action)
    count = _prompt_count(action)
    if count is None:
        return

    try:
        trade = operation(market, portfolio, ticker, count)
    except TradeError as e:
        console.print(f"[red]  {escape(str(e))}[/red]")
        return

    console.print(f"[green]  {trade}[/green]")


def run_session(market: Market, portfolio: Portfolio) -> None:
    """Run the interactive menu until the user quits or input ends."""
    console.print(Panel("[bold]Welcome to the Marketsim![/bold]", box=box.DOUBLE))
    print_help()

    try:
        while _dispatch(market, portfolio, _read_command()):
            pass
    except EOFError:
        logger.debug("Input ended; closing the session")


def _dispatch(market: Market, portfolio: Portfolio, command: Optional[Command]) -> bool:
    """Run one menu command. Returns False once the user quits."""
    if command is None:
        print_help()
    elif command is Command.VIEW:
        _view_stock(market)
    elif command is Command.ALL:
        console.print(market_table(list(market)))
    elif command is Command.PORTFOLIO:
        console.print(portfolio_table(portfolio))
    elif command in (Command.BUY, Command.SELL):
        _trade(market, portfolio, command)
    elif command is Command.UPDATE:
        market.update()
    elif command is Command.QUIT:
        return False
    return True


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Trade stocks from a text-file market.")
    parser.add_argument(
        "market_file", nargs="?", default=DEFAULT_CONFIG.DEFAULT_MARKET_FILE
    )
    parser.add_argument(
        "portfolio_file", nargs="?", default=DEFAULT_CONFIG.DEFAULT_PORTFOLIO_FILE
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI application. Returns the process exit code."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        market = Market.load(args.market_file)
        portfolio = Portfolio.load(args.portfolio_file)
    except (OSError, LoadError) as e:
        console.print(f"[red]Could not start: {escape(str(e))}[/red]")
        return 1

    run_session(market, portfolio)

    try:
        market.save(args.market_file)
        portfolio.save(args.portfolio_file)
    except OSError as e:
        console.print(f"[red]Could not save: {escape(str(e))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
