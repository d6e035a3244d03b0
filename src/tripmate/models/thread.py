from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, DateTime, UniqueConstraint, func
from tripmate.db.session import Base

class Thread(Base):
    """conversation between exactly two users"""
    __tablename__ = "thread"
    __table_args__ = (UniqueConstraint("user_one_id", "user_two_id", name="uq_thread_pair"),)
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # smaller user id is always stored first so a pair maps to a single row
    user_one_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    user_two_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.user_one_id, self.user_two_id)

    def other_participant(self, user_id: int) -> int:
        return self.user_two_id if user_id == self.user_one_id else self.user_one_id
