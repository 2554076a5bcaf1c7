"""HTTP and WebSocket surface."""

from squadboard.api.app import create_app

__all__ = ["create_app"]
