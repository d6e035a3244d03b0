"""Durable store interface consumed by the real-time core.

The core needs exactly two things from persistence:

* ``record_message`` writes a chat message and returns the canonical stored
  row (id, timestamp, sender, content, kind), or ``None`` when nothing was
  written.
* ``set_presence`` stamps a user's online flag and last-seen time.

``SqlChatStore`` backs both with SQLAlchemy, opening one short-lived session
per call so it can be used outside a request (socket connect / disconnect).
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripmate.core.errors import PersistenceError
from tripmate.models.message import Message
from tripmate.repositories import message as message_repo
from tripmate.repositories import thread as thread_repo
from tripmate.repositories import user as user_repo

logger = logging.getLogger(__name__)

__all__ = ["ChatStore", "SqlChatStore"]


class ChatStore(Protocol):
    async def record_message(
        self, thread_id: int, sender_id: int, kind: str, content: str
    ) -> Optional[Message]: ...

    async def set_presence(self, user_id: int, is_online: bool) -> None: ...


class SqlChatStore:
    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record_message(
        self, thread_id: int, sender_id: int, kind: str, content: str
    ) -> Optional[Message]:
        """Persist a message; ``None`` if the thread is unknown or the sender
        is not one of its participants."""
        try:
            async with self._session_factory() as session:
                thread = await thread_repo.get_by_id(session, thread_id)
                if thread is None or not thread.has_participant(sender_id):
                    logger.info(
                        "Message rejected by store",
                        extra={"thread_id": thread_id, "sender_id": sender_id},
                    )
                    return None
                msg = await message_repo.create(
                    session,
                    thread_id=thread_id,
                    sender_id=sender_id,
                    content=content,
                    message_type=kind,
                )
                await session.commit()
                return msg
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError("Failed to store message") from e

    async def set_presence(self, user_id: int, is_online: bool) -> None:
        try:
            async with self._session_factory() as session:
                touched = await user_repo.update_last_seen(session, user_id, is_online)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError("Failed to update last seen") from e
        if not touched:
            logger.debug("Presence update matched no user", extra={"user_id": user_id})
