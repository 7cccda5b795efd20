"""Unit tests for portfolio merge and summary computation."""
import pytest

from app.models.holding import Holding
from app.schemas.market import CoinMarket
from app.schemas.portfolio import PortfolioCoin
from app.services.valuation import merge_portfolio, summarize_portfolio


def _coin(coin_id: str, price: float, amount: float) -> PortfolioCoin:
    return PortfolioCoin(
        id=coin_id, name=coin_id.title(), symbol=coin_id[:3],
        current_price=price, amount=amount,
    )


class TestMergePortfolio:

    def test_attaches_amounts_by_id(self):
        holdings = [Holding(coin_id="ethereum", amount=2.0), Holding(coin_id="bitcoin", amount=0.5)]
        snapshots = [
            CoinMarket(id="bitcoin", name="Bitcoin", symbol="btc", current_price=100.0),
            CoinMarket(id="ethereum", name="Ethereum", symbol="eth", current_price=10.0),
        ]

        coins = merge_portfolio(holdings, snapshots)

        assert [c.id for c in coins] == ["bitcoin", "ethereum"]
        assert coins[0].amount == 0.5
        assert coins[0].value == 50.0
        assert coins[1].amount == 2.0
        assert coins[1].value == 20.0

    def test_snapshot_without_holding_gets_zero_amount(self):
        snapshots = [CoinMarket(id="solana", name="Solana", symbol="sol", current_price=20.0)]

        coins = merge_portfolio([], snapshots)

        assert coins[0].amount == 0.0
        assert coins[0].value == 0.0

    def test_holding_missing_from_provider_is_dropped(self):
        holdings = [Holding(coin_id="delisted", amount=3.0)]

        assert merge_portfolio(holdings, []) == []


class TestSummarizePortfolio:

    def test_empty_portfolio(self):
        summary = summarize_portfolio([])

        assert summary.total_value == 0.0
        assert summary.valued_count == 0
        assert summary.tracked_count == 0
        assert summary.top_holding is None
        assert summary.allocation == []

    def test_total_is_sum_of_price_times_amount(self):
        coins = [_coin("bitcoin", 50000.0, 0.1), _coin("ethereum", 2000.0, 2.0)]

        summary = summarize_portfolio(coins)

        assert summary.total_value == pytest.approx(50000.0 * 0.1 + 2000.0 * 2.0)
        assert summary.valued_count == 2

    def test_zero_amount_excluded_from_total_and_allocation(self):
        coins = [
            _coin("bitcoin", 50000.0, 0.1),
            _coin("dogecoin", 0.1, 0.0),
        ]

        summary = summarize_portfolio(coins)

        assert summary.total_value == pytest.approx(5000.0)
        assert summary.tracked_count == 1
        assert summary.valued_count == 1
        assert [a.id for a in summary.allocation] == ["bitcoin"]
        assert summary.allocation[0].percentage == pytest.approx(100.0)

    def test_only_tracked_coins(self):
        summary = summarize_portfolio([_coin("bitcoin", 50000.0, 0.0)])

        assert summary.total_value == 0.0
        assert summary.tracked_count == 1
        assert summary.top_holding is None
        assert summary.allocation == []

    def test_top_holding_and_percentages(self):
        coins = [_coin("bitcoin", 100.0, 1.0), _coin("ethereum", 10.0, 30.0)]

        summary = summarize_portfolio(coins)

        assert summary.top_holding.id == "ethereum"
        assert summary.top_holding.value == pytest.approx(300.0)
        assert summary.top_holding.percentage == pytest.approx(75.0)
        percentages = {a.id: a.percentage for a in summary.allocation}
        assert percentages == pytest.approx({"bitcoin": 25.0, "ethereum": 75.0})
        assert sum(percentages.values()) == pytest.approx(100.0)

    def test_allocation_symbols_are_uppercase(self):
        summary = summarize_portfolio([_coin("bitcoin", 1.0, 1.0)])

        assert summary.allocation[0].symbol == "BIT"
