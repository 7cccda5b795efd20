"""Domain exceptions surfaced to API clients as transient error messages."""
from fastapi import status


class TrackerError(Exception):
    """Base class for errors reported back to the user.

    Attributes:
        message: Human readable message shown to the user
        status_code: HTTP status used when the error reaches the API boundary
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MarketDataError(TrackerError):
    """Market-data provider request failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


class RateLimitExceededError(MarketDataError):
    """Market-data provider answered with HTTP 429."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str = "Rate limit exceeded. Please try again in a moment."):
        super().__init__(message)


class CoinNotFoundError(MarketDataError):
    """Requested coin id is unknown to the provider."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, coin_id: str):
        super().__init__(f"Coin '{coin_id}' was not found")
        self.coin_id = coin_id


class DuplicateEmailError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, email: str):
        super().__init__("Email is already in use")
        self.email = email


class InvalidAmountError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, amount: float):
        super().__init__("Please enter a valid amount (or leave empty to just track)")
        self.amount = amount


class UnsupportedCurrencyError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, currency: str):
        super().__init__(f"Currency '{currency}' is not supported")
        self.currency = currency
