"""Revoked access tokens."""
from sqlalchemy import Column, Integer, String, DateTime
from app.core.database import Base, utc_now


class RevokedToken(Base):
    """JWT id that was logged out before it expired."""
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    revoked_at = Column(DateTime(timezone=True), default=utc_now)
