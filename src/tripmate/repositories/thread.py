"""Repository helpers for the Thread model."""

from typing import Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, and_, case, func

from tripmate.models.message import Message
from tripmate.models.thread import Thread
from tripmate.models.user import User

__all__ = [
    "get_by_id",
    "get_between",
    "create",
    "list_between",
    "list_for_user_with_last_message",
]


def _ordered(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a <= b else (b, a)


async def get_by_id(session: AsyncSession, thread_id: int) -> Optional[Thread]:
    res = await session.execute(select(Thread).where(Thread.id == thread_id))
    return res.scalar_one_or_none()


async def get_between(session: AsyncSession, user_id: int, other_user_id: int) -> Optional[Thread]:
    """Return the thread shared by two users, or None."""
    one, two = _ordered(user_id, other_user_id)
    res = await session.execute(
        select(Thread).where(Thread.user_one_id == one, Thread.user_two_id == two)
    )
    return res.scalar_one_or_none()


async def create(session: AsyncSession, *, user_id: int, other_user_id: int) -> Thread:
    """Create a Thread for the pair (flushed, not committed)."""
    one, two = _ordered(user_id, other_user_id)
    thread = Thread(user_one_id=one, user_two_id=two)
    session.add(thread)
    await session.flush()
    return thread


async def list_between(session: AsyncSession, user_id: int, other_user_ids: Sequence[int]) -> list[Thread]:
    """Return every existing thread between ``user_id`` and any of ``other_user_ids``."""
    if not other_user_ids:
        return []
    others = list(other_user_ids)
    stmt = select(Thread).where(
        or_(
            and_(Thread.user_one_id == user_id, Thread.user_two_id.in_(others)),
            and_(Thread.user_two_id == user_id, Thread.user_one_id.in_(others)),
        )
    ).order_by(Thread.id)
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def list_for_user_with_last_message(
    session: AsyncSession, user_id: int, *, limit: int, offset: int = 0
) -> list[tuple[Thread, User, Optional[Message]]]:
    """Threads of ``user_id`` with the other participant and the latest message.

    Most recent activity first: the last message time, or the thread creation
    time for threads without messages.
    """
    last = (
        select(Message.thread_id, func.max(Message.id).label("last_id"))
        .group_by(Message.thread_id)
        .subquery()
    )
    other_id = case((Thread.user_one_id == user_id, Thread.user_two_id), else_=Thread.user_one_id)
    stmt = (
        select(Thread, User, Message)
        .join(User, User.id == other_id)
        .outerjoin(last, last.c.thread_id == Thread.id)
        .outerjoin(Message, Message.id == last.c.last_id)
        .where(or_(Thread.user_one_id == user_id, Thread.user_two_id == user_id))
        .order_by(func.coalesce(Message.created_at, Thread.created_at).desc(), Thread.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await session.execute(stmt)
    return [(thread, other, message) for thread, other, message in res.all()]
