"""Portfolio store: read-modify-write operations on one user's record.

Every operation commits immediately. Two sessions editing the same portfolio
are not reconciled; the last write wins.
"""
import logging
import math
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import utc_now
from app.core.exceptions import DuplicateEmailError, InvalidAmountError
from app.core.security import get_password_hash
from app.models.holding import Holding
from app.models.user import User

settings = get_settings()
logger = logging.getLogger("portfolio")


def _find_holding(user: User, coin_id: str) -> Optional[Holding]:
    for holding in user.holdings:
        if holding.coin_id == coin_id:
            return holding
    return None


def _check_amount(amount: float) -> float:
    amount = float(amount)
    if math.isnan(amount) or amount < 0:
        raise InvalidAmountError(amount)
    return amount


def create_user_profile(db: Session, email: str, password: str, display_name: str) -> User:
    """Create a user with default preferences and an empty portfolio.

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    if db.query(User).filter(User.email == email).first():
        raise DuplicateEmailError(email)

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        display_name=display_name,
        preferred_currency=settings.default_currency,
        created_at=utc_now(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Another signup with the same email committed after our check
        db.rollback()
        raise DuplicateEmailError(email) from e
    db.refresh(user)

    logger.info(f"Created profile for user {user.id}")
    return user


def get_user_profile(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def update_user_profile(db: Session, user: User, display_name: str) -> User:
    user.display_name = display_name
    db.commit()
    db.refresh(user)
    return user


def update_preferred_currency(db: Session, user: User, currency: str) -> User:
    user.preferred_currency = currency.lower()
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} switched display currency to {user.preferred_currency}")
    return user


def add_coin_to_portfolio(db: Session, user: User, coin_id: str, amount: float = 0) -> Holding:
    """Add a coin, or accumulate onto the existing holding.

    Args:
        db: Database session
        user: Portfolio owner
        coin_id: Provider coin id
        amount: Quantity to add, 0 to just track the coin

    Returns:
        The created or updated holding

    Raises:
        InvalidAmountError: If amount is negative
    """
    amount = _check_amount(amount)

    holding = _find_holding(user, coin_id)
    if holding:
        holding.amount = float(holding.amount) + amount
        db.commit()
    else:
        holding = Holding(coin_id=coin_id, amount=amount, added_at=utc_now())
        user.holdings.append(holding)
        try:
            db.commit()
        except IntegrityError:
            # Another session inserted this coin after our read; add onto its row
            db.rollback()
            holding = db.query(Holding).filter(
                Holding.user_id == user.id,
                Holding.coin_id == coin_id
            ).one()
            holding.amount = float(holding.amount) + amount
            db.commit()

    db.refresh(holding)

    logger.info(f"User {user.id} added {amount} {coin_id} (now {holding.amount})")
    return holding


def update_coin_amount(db: Session, user: User, coin_id: str, amount: float) -> Optional[Holding]:
    """Overwrite the amount of an existing holding.

    Returns:
        The updated holding, or None when the coin is not in the portfolio

    Raises:
        InvalidAmountError: If amount is negative
    """
    amount = _check_amount(amount)

    holding = _find_holding(user, coin_id)
    if holding is None:
        return None

    holding.amount = amount
    db.commit()
    db.refresh(holding)

    logger.info(f"User {user.id} set {coin_id} amount to {amount}")
    return holding


def remove_coin_from_portfolio(db: Session, user: User, coin_id: str) -> bool:
    """Remove a coin from the portfolio.

    Returns:
        True if a holding was removed, False if the coin was not present
    """
    holding = _find_holding(user, coin_id)
    if holding is None:
        return False

    user.holdings.remove(holding)
    db.commit()

    logger.info(f"User {user.id} removed {coin_id}")
    return True
