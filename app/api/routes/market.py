"""Market-data API endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from app.core.config import get_settings
from app.core.security import get_optional_user
from app.models.user import User
from app.schemas.market import CoinMarket, SearchResponse
from app.services.coingecko_api import CoinGeckoAPI, get_market_api
from app.services.search import SearchDebouncer, get_search_debouncer

router = APIRouter(prefix="/market", tags=["market"])
settings = get_settings()


def _display_currency(user: Optional[User], currency: Optional[str]) -> str:
    """Explicit query value, else the user's preferred currency, else the default."""
    if currency:
        return currency.strip().lower()
    if user is not None and user.preferred_currency:
        return user.preferred_currency
    return settings.default_currency


@router.get("/trending", response_model=List[CoinMarket])
def get_trending(
    currency: Optional[str] = Query(None, description="Display currency, overrides the preferred one"),
    user: Optional[User] = Depends(get_optional_user),
    market: CoinGeckoAPI = Depends(get_market_api)
):
    """Get the top coins by market cap."""
    return market.get_trending_coins(_display_currency(user, currency))


@router.get("/coins/{coin_id}", response_model=CoinMarket)
def get_coin(
    coin_id: str,
    currency: Optional[str] = Query(None, description="Display currency, overrides the preferred one"),
    user: Optional[User] = Depends(get_optional_user),
    market: CoinGeckoAPI = Depends(get_market_api)
):
    """Get a single coin's market snapshot."""
    return market.get_coin_data(coin_id, _display_currency(user, currency))


@router.get("/search", response_model=SearchResponse)
async def search(
    request: Request,
    q: str = Query("", max_length=100, description="Search text, at least 3 characters"),
    user: Optional[User] = Depends(get_optional_user),
    debouncer: SearchDebouncer = Depends(get_search_debouncer)
):
    """Search coins as the user types.

    Requests from the same client are debounced: only the latest query within
    the debounce window reaches the provider.
    """
    if user is not None:
        key = f"user:{user.id}"
    else:
        key = f"client:{request.client.host if request.client else 'unknown'}"

    results = await debouncer.submit(key, q)
    if results is None:
        return SearchResponse(query=q.strip(), superseded=True)
    return SearchResponse(query=q.strip(), results=results)


@router.get("/currencies", response_model=List[str])
def get_currencies(market: CoinGeckoAPI = Depends(get_market_api)):
    """List supported valuation currencies."""
    return market.get_supported_currencies()
