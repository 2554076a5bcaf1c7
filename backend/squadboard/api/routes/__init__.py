"""API routes module."""

from squadboard.api.routes.squads import router as squads_router
from squadboard.api.routes.websocket import router as websocket_router

__all__ = ["squads_router", "websocket_router"]
