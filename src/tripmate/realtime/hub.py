"""Process-local registry of live connections and the broadcast primitive.

The hub is created once per application (``app.state.hub``) and handed to
whatever needs to emit: the socket gateway, the presence broadcaster and the
HTTP-side delivery bridge. Nothing looks it up from module globals.

Mutations (register, room changes, unregister) run between suspension points
of the single event loop, so they need no lock. Emission to a room awaits all
member sends before returning, so two consecutive emits to the same room reach
every member in issue order.

Horizontal scaling needs an external fan-out layer behind ``Broadcaster`` and
a shared ``PresenceStore``; within one process the single dispatch loop is
the throughput ceiling.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

from tripmate.realtime.connection import Connection
from tripmate.realtime.presence import InMemoryPresenceStore, PresenceStore
from tripmate.realtime.rooms import RoomManager, user_room

logger = logging.getLogger(__name__)

__all__ = ["Broadcaster", "RealtimeHub"]


class Broadcaster(Protocol):
    """Emit capability injected into components that push live events."""

    async def emit(
        self,
        event: str,
        data: dict[str, Any],
        *,
        room: Optional[str] = None,
        skip_sid: Optional[str] = None,
    ) -> int: ...


class RealtimeHub:
    def __init__(self, presence: Optional[PresenceStore] = None) -> None:
        self.presence: PresenceStore = presence if presence is not None else InMemoryPresenceStore()
        self.rooms = RoomManager()
        self._connections: dict[str, Connection] = {}

    # -- lifecycle -------------------------------------------------------------

    def register(self, conn: Connection) -> None:
        """Track an authenticated connection, record it as the user's presence
        entry and put it in the user's personal room."""
        self._connections[conn.sid] = conn
        self.presence.set(conn.user_id, conn.sid)
        self.rooms.enter(conn, user_room(conn.user_id))

    def unregister(self, conn: Connection) -> None:
        """Drop a connection from every room and from the registry.

        The presence entry is left alone; the presence broadcaster decides
        what happens to it.
        """
        self.rooms.leave_all(conn)
        self._connections.pop(conn.sid, None)

    def get(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def user_connections(self, user_id: int) -> list[Connection]:
        return self.rooms.members(user_room(user_id))

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # -- emission --------------------------------------------------------------

    async def emit(
        self,
        event: str,
        data: dict[str, Any],
        *,
        room: Optional[str] = None,
        skip_sid: Optional[str] = None,
    ) -> int:
        """Send ``event`` to a room (or to every connection when ``room`` is
        None), optionally excluding one sender. Returns the number of
        connections the frame was delivered to."""
        targets = self.rooms.members(room) if room is not None else list(self._connections.values())
        if skip_sid is not None:
            targets = [c for c in targets if c.sid != skip_sid]
        if not targets:
            return 0
        results = await asyncio.gather(*(c.emit(event, data) for c in targets))
        return sum(1 for ok in results if ok)

    async def emit_to_user(self, user_id: int, event: str, data: dict[str, Any]) -> int:
        """Direct delivery to the connection currently on record for a user."""
        sid = self.presence.get(user_id)
        conn = self._connections.get(sid) if sid else None
        if conn is None:
            return 0
        return 1 if await conn.emit(event, data) else 0
