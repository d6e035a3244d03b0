from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import Optional
from tripmate.models.user import User

async def get_by_id(session: AsyncSession, id: int) -> Optional[User]:
    res = await session.execute(select(User).where(User.id == id))
    return res.scalar_one_or_none()

async def create(session: AsyncSession, email: str, id: int | None = None) -> User:
    user = User(email=email, **({"id": id} if id else {}))
    session.add(user)
    await session.flush()
    return user

async def update_last_seen(session: AsyncSession, id: int, is_online: bool) -> int:
    """Stamp ``last_seen`` and the online flag; returns the number of rows touched."""
    res = await session.execute(
        update(User)
        .where(User.id == id)
        .values(is_online=is_online, last_seen=datetime.now(timezone.utc))
    )
    return res.rowcount or 0
