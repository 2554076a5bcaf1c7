"""Bot announcements posted into squad chat rooms."""

import logging
from datetime import datetime, timezone
from typing import Any

from squadboard.chat.connection_manager import ConnectionManager, manager

logger = logging.getLogger(__name__)


class ChatAnnouncer:
    """
    Publishes bot events to a squad's chat room.

    Delivery is at-most-once: a message is sent to whoever is connected at
    the time and never retried.
    """

    def __init__(self, connections: ConnectionManager | None = None):
        self.connections = connections or manager

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        squad_id = payload["squad_id"]
        message = {
            "type": event,
            "squad_id": squad_id,
            "message": payload.get("message", ""),
            "is_bot": True,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        delivered = await self.connections.broadcast_to_room(squad_id, message)
        logger.info(f"Published {event} to squad {squad_id} ({delivered} recipients)")
