"""Schemas for market-data provider responses."""
from pydantic import BaseModel
from typing import List, Optional


class CoinMarket(BaseModel):
    """Live market snapshot of one coin in a given currency."""
    id: str
    name: str
    symbol: str
    image: Optional[str] = None
    current_price: float = 0.0
    price_change_percentage_24h: float = 0.0


class CoinSearchResult(BaseModel):
    """One entry of a text search."""
    id: str
    name: str
    symbol: str
    thumb: Optional[str] = None
    market_cap_rank: Optional[int] = None


class SearchResponse(BaseModel):
    """Debounced search answer.

    ``superseded`` is set when a newer query from the same client replaced
    this one before it ran.
    """
    query: str
    results: List[CoinSearchResult] = []
    superseded: bool = False
