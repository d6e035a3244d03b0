from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey, Text, DateTime, Boolean
from tripmate.db.session import Base

MESSAGE_TYPES = ("text", "file")

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Message(Base):
    """chat message"""
    __tablename__ = "message"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(ForeignKey("thread.id"), nullable=False, index=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    message_type: Mapped[str] = mapped_column(String(16), default="text", nullable=False)
    # plain text, or the object storage URL for file messages
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
