"""CoinGecko market-data API integration service."""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import requests
from app.core.config import get_settings
from app.core.exceptions import CoinNotFoundError, MarketDataError, RateLimitExceededError
from app.schemas.market import CoinMarket, CoinSearchResult

settings = get_settings()
logger = logging.getLogger("api")


def _to_market(data: Dict[str, Any]) -> CoinMarket:
    """Build a snapshot from a ``/coins/markets`` entry."""
    return CoinMarket(
        id=data.get("id"),
        name=data.get("name") or "",
        symbol=data.get("symbol") or "",
        image=data.get("image"),
        current_price=data.get("current_price") or 0.0,
        price_change_percentage_24h=data.get("price_change_percentage_24h") or 0.0,
    )


class CoinGeckoAPI:
    """Wrapper class for CoinGecko public API operations."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[int] = None):
        """Initialize CoinGecko API client.

        Args:
            api_key: Demo API key sent as ``x-cg-demo-api-key`` (defaults to settings)
            base_url: API root URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.api_key = api_key if api_key is not None else settings.coingecko_api_key
        self.base_url = (base_url or settings.coingecko_api_base).rstrip("/")
        self.timeout = timeout or settings.external_timeout

        self.session = requests.Session()
        self.session.headers.update({"accept": "application/json"})
        if self.api_key:
            self.session.headers.update({"x-cg-demo-api-key": self.api_key})
        else:
            logger.info("CoinGecko API key not provided, using anonymous rate limits")

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Call a public endpoint and decode its JSON body.

        Args:
            path: Endpoint path (e.g., '/coins/markets')
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            RateLimitExceededError: If the provider answered 429
            MarketDataError: On any other transport or HTTP failure
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"CoinGecko request error for {path}: {e}")
            raise MarketDataError("Failed to reach the market data provider") from e

        if response.status_code == 429:
            logger.error("CoinGecko API rate limit exceeded")
            raise RateLimitExceededError()

        try:
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"CoinGecko API error for {path}: {response.status_code} - {response.text}")
            raise MarketDataError("Market data provider returned an error") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from CoinGecko for {path}: {e}")
            raise MarketDataError("Market data provider returned an invalid response") from e

    def get_trending_coins(self, currency: str = "usd") -> List[CoinMarket]:
        """Get the top coins by market cap.

        Args:
            currency: Display currency code

        Returns:
            List of market snapshots
        """
        data = self._get("/coins/markets", params={
            "vs_currency": currency,
            "order": "market_cap_desc",
            "per_page": settings.trending_limit,
            "page": 1,
            "sparkline": "false",
        })
        return [_to_market(c) for c in data]

    def get_coin_data(self, coin_id: str, currency: str = "usd") -> CoinMarket:
        """Get a single coin's snapshot from its detail endpoint.

        Args:
            coin_id: Provider coin id
            currency: Display currency code

        Returns:
            Market snapshot

        Raises:
            CoinNotFoundError: If the provider does not know the coin
        """
        try:
            data = self._get(f"/coins/{quote(coin_id, safe='')}", params={
                "localization": "false",
                "tickers": "false",
                "community_data": "false",
                "developer_data": "false",
            })
        except MarketDataError as e:
            response = getattr(e.__cause__, "response", None)
            if response is not None and response.status_code == 404:
                raise CoinNotFoundError(coin_id) from e
            raise

        if not isinstance(data, dict):
            logger.error(f"Unexpected coin detail payload for {coin_id}: {type(data).__name__}")
            raise MarketDataError("Market data provider returned an invalid response")

        market_data = data.get("market_data") or {}
        return CoinMarket(
            id=data.get("id") or coin_id,
            name=data.get("name") or "",
            symbol=data.get("symbol") or "",
            image=(data.get("image") or {}).get("small"),
            current_price=(market_data.get("current_price") or {}).get(currency) or 0.0,
            price_change_percentage_24h=market_data.get("price_change_percentage_24h") or 0.0,
        )

    def get_multiple_coins_data(self, ids: List[str], currency: str = "usd") -> List[CoinMarket]:
        """Get snapshots for several coins in one request.

        Args:
            ids: Provider coin ids
            currency: Display currency code

        Returns:
            List of market snapshots, in provider order (market cap descending)
        """
        if not ids:
            return []

        data = self._get("/coins/markets", params={
            "vs_currency": currency,
            "ids": ",".join(ids),
            "order": "market_cap_desc",
            "per_page": settings.batch_page_size,
            "page": 1,
            "sparkline": "false",
        })
        return [_to_market(c) for c in data]

    def get_supported_currencies(self) -> List[str]:
        """Get the currency codes accepted for valuation.

        Returns:
            List of lowercase currency codes; the configured fallback list if
            the provider cannot be reached
        """
        try:
            return list(self._get("/simple/supported_vs_currencies"))
        except MarketDataError as e:
            logger.warning(f"Using fallback currencies: {e.message}")
            return list(settings.fallback_currencies)

    def search_coins(self, query: str) -> List[CoinSearchResult]:
        """Search coins by name or symbol.

        Args:
            query: Free text query

        Returns:
            Up to ``search_result_limit`` matches
        """
        data = self._get("/search", params={"query": query})
        coins = (data.get("coins") or [])[:settings.search_result_limit]
        return [
            CoinSearchResult(
                id=c.get("id"),
                name=c.get("name") or "",
                symbol=c.get("symbol") or "",
                thumb=c.get("thumb"),
                market_cap_rank=c.get("market_cap_rank"),
            )
            for c in coins
        ]


# Global instance
coingecko_api = CoinGeckoAPI()


def get_market_api() -> CoinGeckoAPI:
    """Dependency returning the shared market-data client."""
    return coingecko_api
