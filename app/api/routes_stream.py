"""Websocket endpoint pushing series change notifications."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from app.core.auth import is_authorized

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/stream")
async def stream(websocket: WebSocket):
    """Keep the connection subscribed until the client goes away.

    Messages have the shape ``{"action", "resourceType", "id", "resource"?}``.
    Anything the client sends is ignored.
    """
    if not is_authorized(websocket):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    broadcaster = websocket.app.state.broadcaster
    await websocket.accept()
    broadcaster.subscribe(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Client disconnected from stream")
    finally:
        broadcaster.unsubscribe(websocket)
