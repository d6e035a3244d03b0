"""Room registry and thread-room membership rules.

Two kinds of rooms exist:

* ``user-<userId>``: joined once at authentication, left only on disconnect.
  Used for direct delivery to every live connection of a user.
* ``thread-<threadId>``: joined on demand. A connection sits in at most one
  thread room, so typing and read signals reach exactly the connections that
  are currently viewing that thread.

Membership is transient and process-local; nothing here is persisted.
"""
from __future__ import annotations

import logging
from typing import Any

from tripmate.realtime.connection import Connection

logger = logging.getLogger(__name__)

THREAD_ROOM_PREFIX = "thread-"
USER_ROOM_PREFIX = "user-"

__all__ = [
    "THREAD_ROOM_PREFIX",
    "USER_ROOM_PREFIX",
    "thread_room",
    "user_room",
    "is_thread_room",
    "valid_thread_id",
    "RoomManager",
]


def thread_room(thread_id: Any) -> str:
    return f"{THREAD_ROOM_PREFIX}{thread_id}"


def user_room(user_id: Any) -> str:
    return f"{USER_ROOM_PREFIX}{user_id}"


def is_thread_room(room: str) -> bool:
    return room.startswith(THREAD_ROOM_PREFIX)


def valid_thread_id(value: Any) -> bool:
    """A thread id is a non-empty string or a non-zero integer."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return False
    return value != 0 and bool(str(value).strip())


class RoomManager:
    def __init__(self) -> None:
        self._rooms: dict[str, dict[str, Connection]] = {}

    # -- registry primitives -------------------------------------------------

    def enter(self, conn: Connection, room: str) -> None:
        self._rooms.setdefault(room, {})[conn.sid] = conn
        conn.rooms.add(room)

    def leave(self, conn: Connection, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.pop(conn.sid, None)
            if not members:
                del self._rooms[room]
        conn.rooms.discard(room)

    def leave_all(self, conn: Connection) -> None:
        for room in list(conn.rooms):
            self.leave(conn, room)

    def members(self, room: str) -> list[Connection]:
        """Snapshot of a room in join order."""
        return list(self._rooms.get(room, {}).values())

    def is_member(self, conn: Connection, room: str) -> bool:
        return conn.sid in self._rooms.get(room, {})

    def thread_rooms_of(self, conn: Connection) -> list[str]:
        return [room for room in conn.rooms if is_thread_room(room)]

    # -- thread membership -----------------------------------------------------

    def join_thread(self, conn: Connection, thread_id: Any) -> dict[str, Any]:
        """Move ``conn`` into ``thread-<thread_id>``; returns the ack payload.

        The personal room is never left. A missing id leaves membership as it
        was and yields an error ack.
        """
        if not valid_thread_id(thread_id):
            logger.info("joinThread without threadId", extra={"sid": conn.sid, "user_id": conn.user_id})
            return {"status": "error", "error": "No threadId provided"}
        for room in self.thread_rooms_of(conn):
            self.leave(conn, room)
        self.enter(conn, thread_room(thread_id))
        logger.info("User joined thread", extra={"user_id": conn.user_id, "thread_id": thread_id, "sid": conn.sid})
        return {"status": "success"}

    def leave_thread(self, conn: Connection, thread_id: Any) -> None:
        if not valid_thread_id(thread_id):
            return
        self.leave(conn, thread_room(thread_id))
        logger.info("User left thread", extra={"user_id": conn.user_id, "thread_id": thread_id, "sid": conn.sid})
