from datetime import datetime
from typing import Any
from pydantic import BaseModel
from .base import ORMBase
from .message import MessageRead


class ThreadRead(ORMBase):
    id: int
    user_one_id: int
    user_two_id: int
    created_at: datetime | None = None


class ExistingThreadsRequest(BaseModel):
    # raw values; non-numeric entries are dropped rather than rejected
    userIds: list[Any] | None = None


class ConversationRead(BaseModel):
    """One row of the caller's conversation list."""
    threadId: int
    userId: int
    email: str
    is_online: bool
    last_seen: datetime | None = None
    lastMessage: MessageRead | None = None
