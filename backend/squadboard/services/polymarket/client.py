from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .config import PolymarketConfig
from .exceptions import (
    PolymarketAPIError,
    PolymarketAuthError,
    PolymarketNotFoundError,
    PolymarketRateLimitError,
)
from .models import ClosedPosition, PositionValue

logger = logging.getLogger(__name__)


class PolymarketClient:
    """Read-only client for the Polymarket data API.

    Failures are raised, never retried; callers decide how to degrade.
    """

    def __init__(
        self,
        config: PolymarketConfig | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or PolymarketConfig()
        if api_key:
            self.config = self.config.model_copy(update={"api_key": api_key})
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(
            f"Initialized PolymarketClient "
            f"(auth={'enabled' if self.config.api_key else 'disabled'})"
        )

    async def __aenter__(self) -> PolymarketClient:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def open(self) -> None:
        if self._client is not None:
            return
        headers = {"Accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            limits=limits,
            headers=headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Closed PolymarketClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "PolymarketClient must be opened or used as async context manager"
            )
        return self._client

    async def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        try:
            response = await self.client.get(endpoint, params=params)
        except httpx.RequestError as e:
            raise PolymarketAPIError(f"Network error on {endpoint}: {e}") from e

        if response.status_code in (401, 403):
            raise PolymarketAuthError(
                "Authentication failed", status_code=response.status_code
            )
        elif response.status_code == 404:
            raise PolymarketNotFoundError(
                f"Resource not found: {endpoint}", status_code=404
            )
        elif response.status_code == 429:
            raise PolymarketRateLimitError("Rate limit exceeded", status_code=429)
        elif not response.is_success:
            raise PolymarketAPIError(
                f"Request to {endpoint} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PolymarketAPIError(
                f"Invalid JSON from {endpoint}", status_code=response.status_code
            ) from e

    async def get_closed_positions(
        self, user: str, start: int | None = None
    ) -> list[ClosedPosition]:
        """Most recent closed positions, sorted by realized PnL descending."""
        params: dict[str, Any] = {
            "user": user,
            "limit": self.config.closed_positions_limit,
            "sortBy": self.config.closed_positions_sort_by,
        }
        if start:
            params["start"] = start

        data = await self._get("/closed-positions", params)
        if not isinstance(data, list):
            return []
        return [ClosedPosition.from_api(item) for item in data if isinstance(item, dict)]

    async def get_positions_value(self, user: str) -> PositionValue:
        """Aggregate value of the user's open positions."""
        data = await self._get("/value", {"user": user})
        return PositionValue.from_api(data, user=user)

    async def fetch_user_data(
        self, user: str, start: int | None = None
    ) -> tuple[list[ClosedPosition], PositionValue]:
        """Fetch closed positions and open value concurrently."""
        closed, value = await asyncio.gather(
            self.get_closed_positions(user, start=start),
            self.get_positions_value(user),
        )
        return closed, value


def create_polymarket_client(
    api_key: str | None = None,
    config: PolymarketConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PolymarketClient:
    """Create a PolymarketClient instance."""
    return PolymarketClient(config=config, api_key=api_key, transport=transport)
