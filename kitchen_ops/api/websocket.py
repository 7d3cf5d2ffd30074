"""WebSocket feed of live queue updates."""

import asyncio
import json
from contextlib import suppress
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from kitchen_ops.models.kitchen import QueueOverview
from kitchen_ops.services.queue import QueueEstimator
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)


class WebSocketMessage(BaseModel):
    """Client message format."""

    type: str  # "ping" or "refresh"
    metadata: dict[str, Any] = {}


class ConnectionManager:
    """Tracks open queue feed connections."""

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        """Accept and register a WebSocket connection."""
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("websocket_connected", connections=len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info("websocket_disconnected", connections=len(self.active_connections))


# Global connection manager
manager = ConnectionManager()


async def _forward(websocket: WebSocket, updates: "asyncio.Queue[QueueOverview]") -> None:
    while True:
        overview = await updates.get()
        await websocket.send_json({"type": "queue", "data": overview.model_dump(mode="json")})


async def handle_queue_feed(websocket: WebSocket, queue: QueueEstimator) -> None:
    """
    Push a QueueOverview to the client on every queue change.

    Args:
        websocket: WebSocket connection
        queue: Running queue estimator
    """
    await manager.connect(websocket)

    updates: asyncio.Queue[QueueOverview] = asyncio.Queue()
    unsubscribe = queue.subscribe(updates.put_nowait)
    sender = asyncio.create_task(_forward(websocket, updates))

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = WebSocketMessage(**json.loads(data))
            except (json.JSONDecodeError, TypeError, ValidationError) as e:
                await websocket.send_json(
                    {
                        "type": "error",
                        "message": "Invalid message format",
                        "details": str(e),
                    }
                )
                continue

            if message.type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message.type == "refresh":
                updates.put_nowait(queue.overview())

    except WebSocketDisconnect:
        logger.info("websocket_client_disconnected")

    finally:
        unsubscribe()
        sender.cancel()
        with suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            await sender
        manager.disconnect(websocket)
