"""Custom exceptions for the Polymarket data API."""


class PolymarketAPIError(Exception):
    """Base exception for Polymarket data API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PolymarketAuthError(PolymarketAPIError):
    """Authentication failed (401/403)."""

    pass


class PolymarketNotFoundError(PolymarketAPIError):
    """Resource not found (404)."""

    pass


class PolymarketRateLimitError(PolymarketAPIError):
    """Rate limit exceeded (429)."""

    pass
