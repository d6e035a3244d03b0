"""Dispatch of inbound socket events for one authenticated connection.

Handlers only use the identity attached to the connection at handshake time.
None of them touch persistence: typing and read signals are live
notifications, room changes are in-memory.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from tripmate.realtime.connection import Connection
from tripmate.realtime.hub import RealtimeHub
from tripmate.realtime.protocol import (
    WsInbound,
    JOIN_THREAD,
    LEAVE_THREAD,
    TYPING,
    MARK_AS_READ,
    READ_MESSAGES,
)
from tripmate.realtime.rooms import thread_room, valid_thread_id

logger = logging.getLogger(__name__)

__all__ = ["EventRouter"]

Handler = Callable[[Connection, dict[str, Any]], Awaitable[Optional[dict[str, Any]]]]


class EventRouter:
    def __init__(self, hub: RealtimeHub) -> None:
        self.hub = hub
        self._handlers: dict[str, Handler] = {
            JOIN_THREAD: self.join_thread,
            LEAVE_THREAD: self.leave_thread,
            TYPING: self.typing,
            MARK_AS_READ: self.mark_as_read,
        }

    @property
    def events(self) -> list[str]:
        return list(self._handlers)

    async def handle_text(self, conn: Connection, text: str) -> None:
        """Parse one raw frame and dispatch it; malformed frames are dropped."""
        try:
            frame = WsInbound.model_validate_json(text)
        except ValidationError:
            logger.warning("Malformed frame dropped", extra={"sid": conn.sid, "user_id": conn.user_id})
            return
        await self.dispatch(conn, frame)

    async def dispatch(self, conn: Connection, frame: WsInbound) -> None:
        handler = self._handlers.get(frame.event)
        if handler is None:
            logger.debug("Unknown event ignored", extra={"sid": conn.sid, "event": frame.event})
            return
        reply = await handler(conn, frame.data)
        if reply is not None and frame.ack is not None:
            await conn.send_ack(frame.ack, reply)

    async def join_thread(self, conn: Connection, data: dict[str, Any]) -> dict[str, Any]:
        return self.hub.rooms.join_thread(conn, data.get("threadId"))

    async def leave_thread(self, conn: Connection, data: dict[str, Any]) -> None:
        self.hub.rooms.leave_thread(conn, data.get("threadId"))

    async def typing(self, conn: Connection, data: dict[str, Any]) -> None:
        thread_id = data.get("threadId")
        if not valid_thread_id(thread_id):
            return
        await self.hub.emit(
            TYPING,
            {"userId": conn.user_id, "isTyping": data.get("isTyping"), "threadId": thread_id},
            room=thread_room(thread_id),
            skip_sid=conn.sid,
        )

    async def mark_as_read(self, conn: Connection, data: dict[str, Any]) -> None:
        thread_id = data.get("threadId")
        if not valid_thread_id(thread_id):
            return
        await self.hub.emit(READ_MESSAGES, {"threadId": thread_id}, room=thread_room(thread_id), skip_sid=conn.sid)
