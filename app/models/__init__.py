"""ORM models; importing the package registers every table on Base.metadata."""
from app.models.holding import Holding
from app.models.token import RevokedToken
from app.models.user import User

__all__ = ["Holding", "RevokedToken", "User"]
