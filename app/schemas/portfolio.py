"""Portfolio schemas for API request/response validation."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from app.schemas.market import CoinMarket


class HoldingCreate(BaseModel):
    """Schema for adding a coin; an omitted amount means tracking only."""
    coin_id: str = Field(
        ..., min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9._-]*$",
        description="Provider coin id (e.g., bitcoin)"
    )
    amount: float = Field(0.0, ge=0, description="Quantity held, 0 to just track the price")


class HoldingUpdate(BaseModel):
    """Schema for overwriting a holding amount."""
    amount: float = Field(..., ge=0)


class HoldingResponse(BaseModel):
    """Schema for a stored holding."""
    coin_id: str
    amount: float
    added_at: datetime

    class Config:
        from_attributes = True


class PortfolioCoin(CoinMarket):
    """Market snapshot merged with the stored amount."""
    amount: float = 0.0
    value: float = 0.0


class AllocationEntry(BaseModel):
    """Share of total value held in one coin."""
    id: str
    symbol: str
    value: float
    percentage: float


class TopHolding(PortfolioCoin):
    percentage: float


class PortfolioSummary(BaseModel):
    """Aggregate figures over valued (non-zero) holdings."""
    total_value: float = 0.0
    valued_count: int = 0
    tracked_count: int = 0
    top_holding: Optional[TopHolding] = None
    allocation: List[AllocationEntry] = []


class PortfolioResponse(BaseModel):
    """Full portfolio view in the user's preferred currency."""
    currency: str
    coins: List[PortfolioCoin]
    summary: PortfolioSummary


class MutationResult(BaseModel):
    """Outcome of a holding mutation, with a user-facing message."""
    success: bool
    message: str
    holding: Optional[HoldingResponse] = None
