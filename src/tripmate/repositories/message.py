"""Repository helpers for the Message model.

Message rows are append-only from the chat core's point of view: it writes a
row and reads it back, it never edits one.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from tripmate.models.message import Message

__all__ = [
    "get_by_id",
    "create",
    "list_by_thread",
]


async def get_by_id(session: AsyncSession, message_id: int) -> Optional[Message]:
    """Return a Message by id or None if it does not exist."""
    res = await session.execute(select(Message).where(Message.id == message_id))
    return res.scalar_one_or_none()


async def create(
    session: AsyncSession,
    *,
    thread_id: int,
    sender_id: int,
    content: str,
    message_type: str = "text",
) -> Message:
    """Create a new Message.

    Parameters:
        session: active AsyncSession.
        thread_id: owning thread id (must exist or hit FK constraint on flush).
        sender_id: authenticated author.
        content: text body, or a storage URL for ``file`` messages.
        message_type: ``text`` or ``file``.

    Returns the persisted Message (flushed, not committed) with its id and
    creation timestamp assigned.
    """
    message = Message(
        thread_id=thread_id,
        sender_id=sender_id,
        content=content,
        message_type=message_type,
        is_read=False,
    )
    session.add(message)
    await session.flush()
    return message


async def list_by_thread(session: AsyncSession, thread_id: int) -> list[Message]:
    res = await session.execute(
        select(Message).where(Message.thread_id == thread_id).order_by(Message.created_at, Message.id)
    )
    return list(res.scalars().all())
