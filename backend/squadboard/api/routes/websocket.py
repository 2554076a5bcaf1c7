"""WebSocket route for squad chat rooms."""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from squadboard.chat import manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["WebSocket"])


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for squad room events.

    Client sends:
    - {"action": "join", "squad_id": 1}
    - {"action": "leave", "squad_id": 1}

    Server sends:
    - {"type": "joined" | "left", "squad_id": 1}
    - {"type": "winner-announced", "squad_id": 1, "message": "...", "is_bot": true, "timestamp": "..."}
    - {"type": "error", "message": "...", "code": "..."}
    """
    await manager.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({
                    "type": "error",
                    "message": "Invalid JSON",
                    "code": "INVALID_JSON",
                })
                continue

            action = message.get("action") if isinstance(message, dict) else None
            squad_id = message.get("squad_id") if isinstance(message, dict) else None

            if not action or squad_id is None:
                await websocket.send_json({
                    "type": "error",
                    "message": "Missing action or squad_id",
                    "code": "INVALID_MESSAGE",
                })
                continue

            try:
                squad_id = int(squad_id)
            except (TypeError, ValueError):
                await websocket.send_json({
                    "type": "error",
                    "message": "Invalid squad_id",
                    "code": "INVALID_SQUAD_ID",
                })
                continue

            if action == "join":
                manager.join(websocket, squad_id)
                await websocket.send_json({"type": "joined", "squad_id": squad_id})
            elif action == "leave":
                manager.leave(websocket, squad_id)
                await websocket.send_json({"type": "left", "squad_id": squad_id})
            else:
                await websocket.send_json({
                    "type": "error",
                    "message": f"Unknown action: {action}",
                    "code": "UNKNOWN_ACTION",
                })

    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.debug("WebSocket disconnected")
