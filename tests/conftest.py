"""
Test fixtures and configuration.
"""
import os
import tempfile

# Keep test runs away from the real database and log directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="tracker-logs-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from typing import Dict, Generator, List
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db, init_db
from app.core.exceptions import CoinNotFoundError
from app.main import app
from app.models.user import User
from app.schemas.market import CoinMarket, CoinSearchResult
from app.services.coingecko_api import CoinGeckoAPI, get_market_api
from app.services.portfolio import create_user_profile
from app.services.search import SearchDebouncer, get_search_debouncer

# Prices in usd used by the fake market-data client
MARKET: Dict[str, CoinMarket] = {
    "bitcoin": CoinMarket(
        id="bitcoin", name="Bitcoin", symbol="btc",
        image="https://example.com/btc.png",
        current_price=50000.0, price_change_percentage_24h=2.5,
    ),
    "ethereum": CoinMarket(
        id="ethereum", name="Ethereum", symbol="eth",
        image="https://example.com/eth.png",
        current_price=2000.0, price_change_percentage_24h=-1.25,
    ),
    "dogecoin": CoinMarket(
        id="dogecoin", name="Dogecoin", symbol="doge",
        image="https://example.com/doge.png",
        current_price=0.1, price_change_percentage_24h=0.0,
    ),
}


@pytest.fixture
def engine():
    """In-memory database shared across connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def market() -> Mock:
    """Fake market-data client backed by MARKET."""
    api = Mock(spec=CoinGeckoAPI)

    def coin_data(coin_id: str, currency: str = "usd") -> CoinMarket:
        if coin_id not in MARKET:
            raise CoinNotFoundError(coin_id)
        return MARKET[coin_id]

    def multiple(ids: List[str], currency: str = "usd") -> List[CoinMarket]:
        return [MARKET[i] for i in ids if i in MARKET]

    api.get_coin_data.side_effect = coin_data
    api.get_multiple_coins_data.side_effect = multiple
    api.get_trending_coins.return_value = list(MARKET.values())
    api.get_supported_currencies.return_value = ["usd", "eur", "gbp"]
    api.search_coins.return_value = [
        CoinSearchResult(id="bitcoin", name="Bitcoin", symbol="BTC", market_cap_rank=1),
    ]
    return api


@pytest.fixture
def client(engine, market) -> Generator[TestClient, None, None]:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    debouncer = SearchDebouncer(market.search_coins, delay=0.0)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_api] = lambda: market
    app.dependency_overrides[get_search_debouncer] = lambda: debouncer

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def user(db_session) -> User:
    return create_user_profile(db_session, "alice@example.com", "secret123", "Alice")


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    """Sign up and log in a user through the API."""
    client.post("/auth/signup", json={
        "email": "bob@example.com",
        "password": "hunter22",
        "display_name": "Bob",
    })
    response = client.post("/auth/login", json={
        "email": "bob@example.com",
        "password": "hunter22",
    })
    token = response.json()["access_token"]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}
