"""One live, authenticated socket session."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Protocol, Union

from tripmate.core.auth import Identity
from tripmate.realtime.protocol import WsOutbound, ACK

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """The part of ``starlette.websockets.WebSocket`` a connection relies on."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


def new_sid() -> str:
    return uuid.uuid4().hex


class Connection:
    """Socket session carrying an identity fixed at authentication time.

    ``rooms`` mirrors the hub's room registry for this connection and is only
    mutated through ``RoomManager``.
    """

    def __init__(self, transport: Transport, identity: Identity, sid: Optional[str] = None) -> None:
        self.transport = transport
        self.identity = identity
        self.sid = sid or new_sid()
        self.rooms: set[str] = set()

    @property
    def user_id(self) -> int:
        return self.identity.user_id

    async def emit(self, event: str, data: dict[str, Any]) -> bool:
        """Send one event frame; False when the transport is already gone."""
        return await self._send(WsOutbound(event=event, data=data).to_frame())

    async def send_ack(self, ack: Union[int, str], data: dict[str, Any]) -> bool:
        return await self._send(WsOutbound(event=ACK, data=data, ack=ack).to_frame())

    async def _send(self, frame: dict[str, Any]) -> bool:
        try:
            await self.transport.send_json(frame)
            return True
        except Exception as e:
            # the receive loop of this connection observes the disconnect and
            # runs the offline transition; delivery to the others goes on
            logger.warning(
                "Send to connection failed",
                extra={"sid": self.sid, "user_id": self.user_id, "error": e.__class__.__name__},
            )
            return False

    def __repr__(self) -> str:
        return f"Connection(sid={self.sid!r}, user_id={self.user_id!r})"
