"""Tests for reading and writing market and portfolio files."""

import logging
from decimal import Decimal

import pytest

from marketsim.errors import LoadError, ValidationError
from marketsim.market import Market
from marketsim.portfolio import Portfolio
from marketsim.storage import (
    dump_market,
    dump_portfolio,
    format_decimal,
    parse_decimal,
    parse_market,
    parse_portfolio,
)
from marketsim.trading import buy


class TestDecimalFormatting:
    def test_six_fractional_digits(self):
        assert format_decimal(Decimal("150")) == "150.000000"

    def test_rounds_extra_digits(self):
        assert format_decimal(Decimal("0.1234567")) == "0.123457"

    def test_negative(self):
        assert format_decimal(Decimal("-3.5")) == "-3.500000"

    def test_parse(self):
        assert parse_decimal("150.000000") == Decimal("150")

    def test_parse_invalid(self):
        with pytest.raises(ValueError, match="Not a number"):
            parse_decimal("abc")

    def test_parse_non_finite(self):
        with pytest.raises(ValueError, match="finite"):
            parse_decimal("nan")
        with pytest.raises(ValueError, match="finite"):
            parse_decimal("Infinity")


class TestMarketCodec:
    def test_parse(self):
        market = parse_market(["AAPL 150.000000 1000.000000\n", "MSFT 300 50\n"])
        assert len(market) == 2
        assert market.lookup("MSFT").price == Decimal("300")

    def test_blank_lines_ignored(self):
        market = parse_market(["\n", "AAPL 150 1000\n", "   \n"])
        assert len(market) == 1

    def test_long_ticker_truncated(self):
        market = parse_market(["GOOGL 100 10\n"])
        assert market.lookup("GOOG") is not None

    def test_dump_most_recent_first(self):
        market = parse_market(["AAPL 150 1000\n", "MSFT 300 50\n"])
        assert dump_market(market) == (
            "MSFT 300.000000 50.000000\n"
            "AAPL 150.000000 1000.000000\n"
        )

    def test_duplicate_ticker_later_line_wins(self):
        market = parse_market(["AAPL 150 1000\n", "AAPL 175 1000\n"])
        assert market.lookup("AAPL").price == Decimal("175")

    def test_invalid_record_aborts_load(self):
        with pytest.raises(LoadError, match="must be positive") as excinfo:
            parse_market(["AAPL 150 1000\n", "MSFT 0 50\n"], path="market.txt")
        assert excinfo.value.line_number == 2
        assert excinfo.value.path == "market.txt"
        assert isinstance(excinfo.value.__cause__, ValidationError)

    def test_missing_field(self):
        with pytest.raises(LoadError, match="got 2 fields"):
            parse_market(["AAPL 150\n"])

    def test_unparsable_price(self):
        with pytest.raises(LoadError, match="Not a number"):
            parse_market(["AAPL cheap 1000\n"])

    def test_error_location_in_message(self):
        with pytest.raises(LoadError, match=r"^market.txt:3: "):
            parse_market(["AAPL 1 1\n", "MSFT 1 1\n", "IBM 1\n"], path="market.txt")


class TestPortfolioCodec:
    def test_parse(self):
        portfolio = parse_portfolio(["1000.000000\n", "AAPL 5.000000\n"])
        assert portfolio.balance == Decimal("1000")
        assert portfolio.lookup_share("AAPL").count == Decimal("5")

    def test_negative_balance_accepted(self):
        portfolio = parse_portfolio(["-20.5\n"])
        assert portfolio.balance == Decimal("-20.5")
        assert len(portfolio) == 0

    def test_zero_holding_skipped(self):
        portfolio = parse_portfolio(["100\n", "AAPL 0.000000\n", "MSFT 2\n"])
        assert portfolio.lookup_share("AAPL") is None
        assert len(portfolio) == 1

    def test_negative_holding_aborts_load(self):
        with pytest.raises(LoadError, match="must not be negative"):
            parse_portfolio(["100\n", "AAPL -1\n"])

    def test_empty_file(self):
        with pytest.raises(LoadError, match="Missing balance"):
            parse_portfolio([])

    def test_unparsable_balance(self):
        with pytest.raises(LoadError, match="Not a number"):
            parse_portfolio(["lots\n"])

    def test_balance_line_with_holding(self):
        with pytest.raises(LoadError, match="<balance>"):
            parse_portfolio(["AAPL 5\n"])

    def test_dump_keeps_zero_holdings(self):
        portfolio = Portfolio(Decimal("250"))
        portfolio.insert_share("AAPL", Decimal("5"))
        portfolio.insert_share("MSFT", Decimal("0"))
        assert dump_portfolio(portfolio) == (
            "250.000000\n"
            "MSFT 0.000000\n"
            "AAPL 5.000000\n"
        )


class TestFiles:
    def test_market_round_trip(self, tmp_path):
        path = tmp_path / "market.txt"
        market = Market()
        market.insert("AAPL", Decimal("150"), Decimal("1000"))
        market.insert("MSFT", Decimal("12.345678"), Decimal("40.5"))
        market.save(path)

        reloaded = Market.load(path)
        assert {s.ticker: (s.price, s.total_shares) for s in reloaded} == {
            s.ticker: (s.price, s.total_shares) for s in market
        }

    def test_portfolio_round_trip_drops_zero_holdings(self, tmp_path):
        path = tmp_path / "portfolio.txt"
        portfolio = Portfolio(Decimal("1000"))
        portfolio.insert_share("AAPL", Decimal("5"))
        portfolio.insert_share("MSFT", Decimal("0"))
        portfolio.save(path)

        assert path.read_text() == "1000.000000\nMSFT 0.000000\nAAPL 5.000000\n"

        reloaded = Portfolio.load(str(path))
        assert reloaded.balance == Decimal("1000")
        assert reloaded.lookup_share("AAPL").count == Decimal("5")
        assert reloaded.lookup_share("MSFT") is None

    def test_scenario_buy_then_save(self, tmp_path):
        market_path = tmp_path / "market.txt"
        portfolio_path = tmp_path / "portfolio.txt"
        market_path.write_text("AAPL 150.000000 1000.000000\n")
        portfolio_path.write_text("1000.000000\n")

        market = Market.load(market_path)
        portfolio = Portfolio.load(portfolio_path)
        buy(market, portfolio, "AAPL", Decimal("5"))
        portfolio.save(portfolio_path)

        assert portfolio_path.read_text() == "250.000000\nAAPL 5.000000\n"

    def test_missing_file_raises_os_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Market.load(tmp_path / "missing.txt")
        with pytest.raises(OSError):
            Portfolio.load(tmp_path / "missing.txt")

    def test_save_to_missing_directory(self, tmp_path):
        with pytest.raises(OSError):
            Market().save(tmp_path / "nowhere" / "market.txt")

    def test_load_error_names_file(self, tmp_path):
        path = tmp_path / "portfolio.txt"
        path.write_text("100\nAAPL x\n")
        with pytest.raises(LoadError) as excinfo:
            Portfolio.load(path)
        assert excinfo.value.path == str(path)
        assert excinfo.value.line_number == 2

    def test_file_level_logging(self, tmp_path, caplog):
        path = tmp_path / "portfolio.txt"
        path.write_text("100\nAAPL 0\nMSFT 2\n")

        with caplog.at_level(logging.DEBUG, logger="marketsim.storage"):
            Portfolio.load(path)

        levels = {r.getMessage(): r.levelno for r in caplog.records}
        assert levels[f"Loaded portfolio with 1 holdings from {path}"] == logging.INFO
        assert levels["Skipping empty holding AAPL"] == logging.DEBUG
