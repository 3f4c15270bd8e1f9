"""
WebSocket Endpoint.

Clients open /ws and send {"type": "authenticate", "userId": "..."} with
an optional "token". Once registered they receive notification pushes
of the form {"type": "notification", "data": {...}}.
"""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from modules.backend.core.exceptions import AuthenticationError
from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.security import decode_token
from modules.backend.realtime.manager import get_connection_manager

logger = get_logger(__name__)

router = APIRouter()


def _authenticate(message: dict) -> str:
    """
    Resolve the user id from an authenticate message.

    Raises:
        AuthenticationError: Missing userId, or a token for another user
    """
    user_id = message.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("userId is required")

    token = message.get("token")
    if token:
        payload = decode_token(token, expected_type="access")
        if payload["sub"] != user_id:
            raise AuthenticationError("Token does not match userId")
    return user_id


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket) -> None:
    manager = get_connection_manager()
    await websocket.accept()
    user_id: str | None = None

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                log_with_source(logger, "realtime", "warning", "Ignoring malformed message")
                continue
            if not isinstance(message, dict):
                log_with_source(logger, "realtime", "warning", "Ignoring non-object message")
                continue

            if message.get("type") != "authenticate":
                continue

            try:
                new_user_id = _authenticate(message)
            except AuthenticationError as e:
                await websocket.send_json({"type": "error", "message": e.message})
                continue

            if user_id and user_id != new_user_id:
                manager.disconnect(user_id, websocket)
            user_id = new_user_id
            manager.connect(user_id, websocket)
            await websocket.send_json({"type": "authenticated", "userId": user_id})
    except WebSocketDisconnect:
        pass
    finally:
        if user_id:
            manager.disconnect(user_id, websocket)
