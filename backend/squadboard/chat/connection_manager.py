"""WebSocket connections grouped into per-squad chat rooms."""

import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks which sockets sit in which squad room."""

    def __init__(self):
        # squad_id -> sockets in that room
        self.rooms: dict[int, set[WebSocket]] = {}
        # socket -> squad_ids it joined
        self.joined: dict[WebSocket, set[int]] = {}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.joined[websocket] = set()
        logger.info(f"WebSocket connected. Total: {len(self.joined)}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a connection and every room it joined."""
        for squad_id in self.joined.pop(websocket, set()):
            self._discard(websocket, squad_id)
        logger.info(f"WebSocket disconnected. Total: {len(self.joined)}")

    def join(self, websocket: WebSocket, squad_id: int) -> None:
        self.rooms.setdefault(squad_id, set()).add(websocket)
        self.joined.setdefault(websocket, set()).add(squad_id)
        logger.debug(f"Joined squad room {squad_id}")

    def leave(self, websocket: WebSocket, squad_id: int) -> None:
        self._discard(websocket, squad_id)
        if websocket in self.joined:
            self.joined[websocket].discard(squad_id)
        logger.debug(f"Left squad room {squad_id}")

    def _discard(self, websocket: WebSocket, squad_id: int) -> None:
        room = self.rooms.get(squad_id)
        if room is not None:
            room.discard(websocket)
            if not room:
                del self.rooms[squad_id]

    async def broadcast_to_room(self, squad_id: int, message: dict) -> int:
        """Send a message to every connection in a squad room. Returns deliveries."""
        delivered = 0
        disconnected = []

        for websocket in list(self.rooms.get(squad_id, set())):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Failed to send to websocket: {e}")
                disconnected.append(websocket)

        for ws in disconnected:
            self.disconnect(ws)

        return delivered


# Singleton connection manager
manager = ConnectionManager()
