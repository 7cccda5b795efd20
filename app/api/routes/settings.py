"""Account settings endpoints: display name and preferred currency."""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.exceptions import UnsupportedCurrencyError
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.user import CurrencyUpdate, ProfileUpdate, UserResponse
from app.services.coingecko_api import CoinGeckoAPI, get_market_api
from app.services.portfolio import update_preferred_currency, update_user_profile

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UserResponse)
def get_settings_profile(current_user: User = Depends(get_current_user)):
    """Get the current user's profile settings."""
    return current_user


@router.put("/profile", response_model=UserResponse)
def save_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the display name."""
    return update_user_profile(db, current_user, profile.display_name)


@router.put("/currency", response_model=UserResponse)
def save_currency(
    update: CurrencyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    market: CoinGeckoAPI = Depends(get_market_api)
):
    """Update the preferred display currency.

    Raises:
        UnsupportedCurrencyError: If the provider cannot value in this currency
    """
    currency = update.preferred_currency.strip().lower()
    if currency not in market.get_supported_currencies():
        raise UnsupportedCurrencyError(currency)
    return update_preferred_currency(db, current_user, currency)


@router.get("/currencies", response_model=List[str])
def list_currencies(market: CoinGeckoAPI = Depends(get_market_api)):
    """List currency codes available for valuation."""
    return market.get_supported_currencies()
