"""WebSocket frame models.

Every frame is a JSON object. Clients send events, optionally tagged with an
``ack`` id when they expect a reply; the server answers such events with an
``ack`` frame carrying the same id.

    client -> server   {"event": "joinThread", "data": {"threadId": 100}, "ack": 1}
    server -> client   {"event": "ack", "ack": 1, "data": {"status": "success"}}
    server -> client   {"event": "typing", "data": {"userId": 7, "isTyping": true, "threadId": 100}}
"""
from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel

# client -> server
JOIN_THREAD = "joinThread"
LEAVE_THREAD = "leaveThread"
TYPING = "typing"
MARK_AS_READ = "markAsRead"

# server -> client
CONNECTED = "connected"
MESSAGE = "message"
READ_MESSAGES = "readMessages"
USER_ONLINE = "user-online"
USER_OFFLINE = "user-offline"
ACK = "ack"


class WsInbound(BaseModel):
    """Client -> Server."""

    event: str
    data: dict[str, Any] = {}
    ack: Optional[Union[int, str]] = None


class WsOutbound(BaseModel):
    """Server -> Client."""

    event: str
    data: dict[str, Any] = {}
    ack: Optional[Union[int, str]] = None

    def to_frame(self) -> dict[str, Any]:
        frame: dict[str, Any] = {"event": self.event, "data": self.data}
        if self.ack is not None:
            frame["ack"] = self.ack
        return frame
