"""Portfolio API endpoints."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.portfolio import (
    HoldingCreate,
    HoldingResponse,
    HoldingUpdate,
    MutationResult,
    PortfolioResponse,
)
from app.services.coingecko_api import CoinGeckoAPI, get_market_api
from app.services.portfolio import (
    add_coin_to_portfolio,
    remove_coin_from_portfolio,
    update_coin_amount,
)
from app.services.valuation import merge_portfolio, summarize_portfolio

router = APIRouter(prefix="/portfolio", tags=["portfolio"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("", response_model=PortfolioResponse)
def get_portfolio(
    current_user: User = Depends(get_current_user),
    market: CoinGeckoAPI = Depends(get_market_api)
):
    """Get holdings merged with live prices, plus the portfolio summary.

    Returns:
        Coins and summary valued in the user's preferred currency
    """
    currency = current_user.preferred_currency or settings.default_currency
    holdings = list(current_user.holdings)

    snapshots = market.get_multiple_coins_data([h.coin_id for h in holdings], currency)
    coins = merge_portfolio(holdings, snapshots)

    return PortfolioResponse(
        currency=currency,
        coins=coins,
        summary=summarize_portfolio(coins),
    )


@router.post("/coins", response_model=MutationResult, status_code=status.HTTP_201_CREATED)
def add_coin(
    payload: HoldingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    market: CoinGeckoAPI = Depends(get_market_api)
):
    """Add a coin to the portfolio, accumulating onto an existing holding.

    Raises:
        CoinNotFoundError: If the provider does not know the coin
    """
    coin = market.get_coin_data(payload.coin_id, current_user.preferred_currency or settings.default_currency)
    holding = add_coin_to_portfolio(db, current_user, coin.id, payload.amount)

    symbol = coin.symbol.upper()
    if payload.amount > 0:
        message = f"Added {payload.amount} {symbol} to your portfolio"
    else:
        message = f"Added {symbol} to your portfolio for tracking"

    return MutationResult(success=True, message=message, holding=HoldingResponse.model_validate(holding))


@router.put("/coins/{coin_id}", response_model=MutationResult)
def set_coin_amount(
    coin_id: str,
    payload: HoldingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Overwrite the amount held for a coin already in the portfolio."""
    holding = update_coin_amount(db, current_user, coin_id, payload.amount)
    if holding is None:
        return MutationResult(success=False, message=f"{coin_id} is not in your portfolio")

    return MutationResult(
        success=True,
        message=f"Updated {coin_id} amount",
        holding=HoldingResponse.model_validate(holding),
    )


@router.delete("/coins/{coin_id}", response_model=MutationResult)
def remove_coin(
    coin_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Remove a coin; removing a coin that is not held is a no-op."""
    removed = remove_coin_from_portfolio(db, current_user, coin_id)
    if not removed:
        return MutationResult(success=False, message=f"{coin_id} is not in your portfolio")
    return MutationResult(success=True, message=f"Removed {coin_id} from your portfolio")
