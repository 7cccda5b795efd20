"""Holding model: a user's recorded quantity of one cryptocurrency."""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base, utc_now


class Holding(Base):
    """One coin in a user's portfolio.

    An amount of zero means the coin is tracked for its price only.
    """
    __tablename__ = "holdings"
    __table_args__ = (
        UniqueConstraint("user_id", "coin_id", name="uq_holdings_user_coin"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Market-data provider id (e.g., "bitcoin", "ethereum")
    coin_id = Column(String(100), nullable=False)

    amount = Column(Float, default=0.0, nullable=False)
    added_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("User", back_populates="holdings")

    def __repr__(self):
        return f"<Holding(coin_id='{self.coin_id}', amount={self.amount})>"
