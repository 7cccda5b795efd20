"""User model for authentication and portfolio ownership."""
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from app.core.config import get_settings
from app.core.database import Base, utc_now


class User(Base):
    """User profile: credentials, display preferences and holdings."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    preferred_currency = Column(String(16), default=lambda: get_settings().default_currency, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    # Holdings in the order they were added
    holdings = relationship(
        "Holding",
        back_populates="user",
        order_by="Holding.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User(email='{self.email}', preferred_currency='{self.preferred_currency}')>"
