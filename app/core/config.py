"""Application configuration settings."""
from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Trenches Tracker"
    app_version: str = "0.1.0"

    # CoinGecko API
    coingecko_api_base: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str = ""
    external_timeout: int = 10
    trending_limit: int = 10
    search_result_limit: int = 10
    batch_page_size: int = 100

    # Database
    database_url: str = "sqlite:///./db/tracker.db"

    # Portfolio settings
    default_currency: str = "usd"
    fallback_currencies: List[str] = ["usd", "eur", "inr", "gbp", "jpy"]

    # Search-as-you-type
    search_min_query_length: int = 3
    search_debounce_seconds: float = 0.5

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    enable_docs: bool = True

    # Security (JWT Authentication)
    jwt_secret_key: str = "change-this-to-a-random-secret-key-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Logging
    log_dir: str = "logs"
    log_timezone: str = "UTC"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
