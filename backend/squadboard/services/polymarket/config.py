from pydantic import BaseModel


class PolymarketConfig(BaseModel):
    """Configuration for the Polymarket data API client."""

    base_url: str = "https://data-api.polymarket.com"
    api_key: str = ""
    closed_positions_limit: int = 50
    closed_positions_sort_by: str = "REALIZEDPNL"
    timeout_seconds: float = 30.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
