"""Service helpers for thread and message history.

Adds higher-level operations on top of repository helpers such as
get-or-create of a thread for a user pair and participant checks.
"""

from typing import Any, Iterable
from sqlalchemy.ext.asyncio import AsyncSession

from tripmate.repositories import thread as thread_repo
from tripmate.repositories import message as message_repo
from tripmate.repositories import user as user_repo
from tripmate.models.thread import Thread
from tripmate.models.message import Message
from tripmate.schemas.message import MessageRead
from tripmate.schemas.thread import ConversationRead

__all__ = [
    "ThreadNotFoundError",
    "NotAParticipantError",
    "UserNotFoundError",
    "get_or_create_thread",
    "get_thread_for_participant",
    "list_thread_messages",
    "existing_threads",
    "list_conversations",
]


class ThreadNotFoundError(Exception):
    pass


class NotAParticipantError(Exception):
    pass


class UserNotFoundError(Exception):
    pass


async def get_or_create_thread(session: AsyncSession, *, user_id: int, other_user_id: int) -> Thread:
    if user_id == other_user_id:
        raise ValueError("Cannot open a thread with yourself")
    thread = await thread_repo.get_between(session, user_id, other_user_id)
    if thread is not None:
        return thread
    # surface a clear error rather than an FK failure
    if not await user_repo.get_by_id(session, other_user_id):
        raise UserNotFoundError()
    return await thread_repo.create(session, user_id=user_id, other_user_id=other_user_id)


async def get_thread_for_participant(session: AsyncSession, *, thread_id: int, user_id: int) -> Thread:
    thread = await thread_repo.get_by_id(session, thread_id)
    if not thread:
        raise ThreadNotFoundError()
    if not thread.has_participant(user_id):
        raise NotAParticipantError()
    return thread


async def list_thread_messages(session: AsyncSession, *, thread_id: int, user_id: int) -> list[Message]:
    await get_thread_for_participant(session, thread_id=thread_id, user_id=user_id)
    return await message_repo.list_by_thread(session, thread_id)


def _numeric_ids(values: Iterable[Any], exclude: int) -> list[int]:
    ids: list[int] = []
    for value in values:
        if isinstance(value, bool):
            continue
        try:
            num = int(value)
        except (TypeError, ValueError):
            continue
        if num != exclude and num not in ids:
            ids.append(num)
    return ids


async def existing_threads(session: AsyncSession, *, user_id: int, other_user_ids: Iterable[Any]) -> dict[int, int]:
    """Map each other user id that already shares a thread with ``user_id`` to that thread id.

    Non-numeric ids and the caller's own id are ignored.
    """
    others = _numeric_ids(other_user_ids, exclude=user_id)
    threads = await thread_repo.list_between(session, user_id, others)
    return {t.other_participant(user_id): t.id for t in threads}


async def list_conversations(session: AsyncSession, *, user_id: int, page: int = 1, limit: int = 20) -> list[dict[str, Any]]:
    """Page of the caller's conversation partners with each thread's last message."""
    rows = await thread_repo.list_for_user_with_last_message(
        session, user_id, limit=limit, offset=(page - 1) * limit
    )
    return [
        ConversationRead(
            threadId=thread.id,
            userId=other.id,
            email=other.email,
            is_online=other.is_online,
            last_seen=other.last_seen,
            lastMessage=MessageRead.model_validate(last) if last is not None else None,
        ).model_dump(mode="json")
        for thread, other, last in rows
    ]
