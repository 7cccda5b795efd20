"""Portfolio valuation: merge live snapshots with stored holdings."""
from typing import Iterable, List, Optional

from app.models.holding import Holding
from app.schemas.market import CoinMarket
from app.schemas.portfolio import AllocationEntry, PortfolioCoin, PortfolioSummary, TopHolding


def merge_portfolio(holdings: Iterable[Holding], snapshots: Iterable[CoinMarket]) -> List[PortfolioCoin]:
    """Attach stored amounts to market snapshots by coin id.

    Snapshots keep the provider's order. A snapshot with no matching holding
    gets an amount of 0.
    """
    amounts = {h.coin_id: float(h.amount or 0) for h in holdings}

    coins = []
    for snapshot in snapshots:
        amount = amounts.get(snapshot.id, 0.0)
        value = snapshot.current_price * amount if amount > 0 else 0.0
        coins.append(PortfolioCoin(**snapshot.model_dump(), amount=amount, value=value))
    return coins


def summarize_portfolio(coins: List[PortfolioCoin]) -> PortfolioSummary:
    """Compute totals, the largest holding and allocation percentages.

    Coins with a zero amount are tracked only: they are counted in
    ``tracked_count`` but never contribute to the total or the allocation.
    """
    valued = [c for c in coins if c.amount > 0]
    total = sum(c.current_price * c.amount for c in valued)

    summary = PortfolioSummary(
        total_value=total,
        valued_count=len(valued),
        tracked_count=len(coins) - len(valued),
    )
    if not valued:
        return summary

    top: Optional[PortfolioCoin] = None
    highest = 0.0
    for coin in valued:
        value = coin.current_price * coin.amount
        if value > highest:
            highest = value
            top = coin

    if top is not None:
        summary.top_holding = TopHolding(
            **top.model_dump(exclude={"value"}),
            value=highest,
            percentage=highest / total * 100,
        )

    summary.allocation = [
        AllocationEntry(
            id=c.id,
            symbol=c.symbol.upper(),
            value=c.current_price * c.amount,
            percentage=(c.current_price * c.amount / total * 100) if total > 0 else 0.0,
        )
        for c in valued
    ]
    return summary
