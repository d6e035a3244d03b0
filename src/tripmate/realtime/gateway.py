"""WebSocket endpoint: connection lifecycle for the real-time channel.

Protocol flow:
    1. Client opens ``{SOCKET_PATH}`` presenting a bearer token (auth header or
       ``?token=``). Invalid credential -> closed with 1008, nothing else runs.
    2. Server accepts, registers presence, joins the personal room and sends
       ``connected {sid, userId}``; every peer receives ``user-online``.
    3. Client events (``joinThread``, ``leaveThread``, ``typing``,
       ``markAsRead``) are dispatched by ``EventRouter``.
    4. On transport disconnect the offline transition runs; every peer
       receives ``user-offline`` unless the user is still connected elsewhere.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from tripmate.core.errors import AuthenticationError
from tripmate.core.config import get_settings
from tripmate.realtime.auth import ConnectionAuthenticator
from tripmate.realtime.connection import Connection
from tripmate.realtime.events import EventRouter
from tripmate.realtime.hub import RealtimeHub
from tripmate.realtime.presence_broadcaster import PresenceBroadcaster
from tripmate.realtime.protocol import CONNECTED

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket(get_settings().socket_path)
async def socket_endpoint(websocket: WebSocket) -> None:
    hub: RealtimeHub = websocket.app.state.hub
    presence: PresenceBroadcaster = websocket.app.state.presence

    try:
        identity = ConnectionAuthenticator(get_settings()).authenticate(websocket)
    except AuthenticationError as e:
        logger.warning("Socket authentication failed", extra={"reason": str(e)})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    conn = Connection(websocket, identity)
    try:
        await conn.emit(CONNECTED, {"sid": conn.sid, "userId": conn.user_id})
        await presence.connected(conn)
    except Exception:
        logger.exception("Connection setup error", extra={"sid": conn.sid, "user_id": conn.user_id})
        hub.unregister(conn)
        hub.presence.discard(conn.user_id, conn.sid)
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    # handlers exist only from here on, after authentication succeeded
    events = EventRouter(hub)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            text = message.get("text")
            if text is None:
                logger.warning("Binary frame dropped", extra={"sid": conn.sid, "user_id": conn.user_id})
                continue
            await events.handle_text(conn, text)
    except WebSocketDisconnect as e:
        logger.info("Socket disconnected", extra={"sid": conn.sid, "user_id": conn.user_id, "code": e.code})
    finally:
        await presence.disconnected(conn)

