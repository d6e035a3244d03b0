from datetime import datetime
from typing import Literal, Optional, Union
from pydantic import BaseModel
from .base import ORMBase

MessageKind = Literal["text", "file"]


class SendMessageRequest(BaseModel):
    # threadId / content are optional at the schema level so that a missing
    # field yields the chat envelope (400 + per-field errors) instead of a 422.
    threadId: Optional[int] = None
    content: Optional[str] = None
    messageType: MessageKind = "text"
    tempId: Optional[Union[str, int]] = None


class FileInfo(BaseModel):
    name: str
    size: int
    type: str


class DeliveredMessage(BaseModel):
    """Payload pushed to the thread room and echoed in the HTTP response.

    Built from the stored row; ``tempId`` and ``fileInfo`` are request-side
    extras and are left out entirely when absent.
    """
    id: int
    tempId: Optional[Union[str, int]] = None
    content: str
    message_type: str
    sender_id: int
    created_at: datetime
    is_read: bool = False
    threadId: int
    fileInfo: Optional[FileInfo] = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class MessageRead(ORMBase):
    id: int
    thread_id: int
    sender_id: int
    message_type: str
    content: str
    is_read: bool
    created_at: datetime
