"""
Realtime Connection Manager.

In-process registry of authenticated WebSocket connections, keyed by
user id. A user may hold several sockets (one per open tab). All
mutation happens on the event loop, so no locking is needed.

Usage:
    manager = get_connection_manager()
    await manager.send_to_user(user_id, {"type": "notification", "data": {...}})
"""

from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """Tracks open sockets per user and fans messages out to them."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}

    def connect(self, user_id: str, websocket: WebSocket) -> None:
        self._connections.setdefault(user_id, set()).add(websocket)
        logger.info(
            "Realtime client registered",
            extra={"user_id": user_id, "sockets": len(self._connections[user_id])},
        )

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        sockets = self._connections.get(user_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._connections[user_id]
        logger.info("Realtime client removed", extra={"user_id": user_id})

    def is_connected(self, user_id: str) -> bool:
        return bool(self._connections.get(user_id))

    def connected_user_count(self) -> int:
        return len(self._connections)

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> int:
        """
        Send a JSON message to every socket the user holds.

        Sockets that fail on send are dropped from the registry. A transport
        failure surfaces from Starlette as WebSocketDisconnect.

        Returns:
            Number of sockets the message was delivered to
        """
        sockets = list(self._connections.get(user_id, ()))
        delivered = 0
        for websocket in sockets:
            try:
                await websocket.send_json(message)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.warning(
                    "Dropping dead realtime socket",
                    extra={"user_id": user_id, "error": str(e)},
                )
                self.disconnect(user_id, websocket)
        return delivered

    def reset(self) -> None:
        self._connections.clear()


_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the process-wide connection manager."""
    global _manager
    if _manager is None:
        _manager = ConnectionManager()
    return _manager
