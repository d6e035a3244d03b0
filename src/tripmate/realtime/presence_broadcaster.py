"""Online / offline transitions of authenticated users.

Connect: register with the hub (presence entry + personal room), persist the
user as online, tell every connected party ``user-online``.

Disconnect: drop the connection from the hub and, unless the user still has
another live connection, clear the presence entry, persist the user as offline
and tell everyone ``user-offline``. A stale connection (one that is no longer
the presence entry on record) never marks a live user offline.

Failures of the last-seen write, whatever the store raises, are logged and
swallowed on both paths; the presence broadcast still goes out.
"""
from __future__ import annotations

import logging

from tripmate.realtime.connection import Connection
from tripmate.realtime.hub import RealtimeHub
from tripmate.realtime.protocol import USER_ONLINE, USER_OFFLINE
from tripmate.services.store import ChatStore

logger = logging.getLogger(__name__)

__all__ = ["PresenceBroadcaster"]


class PresenceBroadcaster:
    def __init__(self, hub: RealtimeHub, store: ChatStore) -> None:
        self.hub = hub
        self.store = store

    async def connected(self, conn: Connection) -> None:
        self.hub.register(conn)
        logger.info("User online", extra={"user_id": conn.user_id, "sid": conn.sid})
        await self._persist(conn.user_id, True)
        await self.hub.emit(USER_ONLINE, {"userId": conn.user_id})

    async def disconnected(self, conn: Connection) -> bool:
        """Run the offline transition for ``conn``; True if the user went offline."""
        user_id = conn.user_id
        self.hub.unregister(conn)
        on_record = self.hub.presence.get(user_id)
        remaining = self.hub.user_connections(user_id)

        if on_record is not None and on_record != conn.sid:
            logger.info(
                "Stale connection closed; presence kept",
                extra={"user_id": user_id, "sid": conn.sid, "current_sid": on_record},
            )
            return False
        if remaining:
            # another device is still attached: hand it the presence entry
            self.hub.presence.set(user_id, remaining[-1].sid)
            logger.info(
                "Connection closed; user still online elsewhere",
                extra={"user_id": user_id, "sid": conn.sid, "current_sid": remaining[-1].sid},
            )
            return False

        self.hub.presence.discard(user_id, conn.sid)
        logger.info("User offline", extra={"user_id": user_id, "sid": conn.sid})
        await self._persist(user_id, False)
        await self.hub.emit(USER_OFFLINE, {"userId": user_id})
        return True

    async def _persist(self, user_id: int, is_online: bool) -> None:
        try:
            await self.store.set_presence(user_id, is_online)
        except Exception:
            # no caller to report to on either transition
            logger.exception("Error updating last seen", extra={"user_id": user_id, "is_online": is_online})
