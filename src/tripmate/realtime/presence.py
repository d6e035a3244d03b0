"""Presence store: authenticated user id -> connection id on record.

At most one entry per user. A second connection from the same user
overwrites the first (last-connected wins for direct delivery targeting).

The hub only talks to the ``PresenceStore`` protocol so a deployment running
several instances can swap the in-memory dict for a shared cache. All calls
are synchronous: mutations happen between suspension points of the single
event loop and need no locking.
"""
from __future__ import annotations

from typing import Optional, Protocol

__all__ = ["PresenceStore", "InMemoryPresenceStore"]


class PresenceStore(Protocol):
    def get(self, user_id: int) -> Optional[str]: ...

    def set(self, user_id: int, sid: str) -> None: ...

    def delete(self, user_id: int) -> None: ...

    def discard(self, user_id: int, sid: str) -> bool:
        """Delete the entry only if it still points at ``sid``; True when removed."""
        ...

    def __contains__(self, user_id: object) -> bool: ...


class InMemoryPresenceStore:
    """Process-local presence map."""

    def __init__(self) -> None:
        self._entries: dict[int, str] = {}

    def get(self, user_id: int) -> Optional[str]:
        return self._entries.get(user_id)

    def set(self, user_id: int, sid: str) -> None:
        self._entries[user_id] = sid

    def delete(self, user_id: int) -> None:
        self._entries.pop(user_id, None)

    def discard(self, user_id: int, sid: str) -> bool:
        if self._entries.get(user_id) != sid:
            return False
        del self._entries[user_id]
        return True

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
