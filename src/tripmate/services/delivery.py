"""Message delivery bridge: durable write first, live broadcast second.

``deliver`` is the only path by which a chat message reaches a thread room.
Each step depends on the previous one:

1. ``ChatStore.record_message`` assigns the canonical id and timestamp.
2. No stored row -> ``PersistenceError``; nothing is broadcast.
3. The payload is built from the stored row, plus the caller's ``tempId``
   (verbatim, only when given), ``is_read: false``, the numeric ``threadId``
   and, for file messages, the upload's ``fileInfo``.
4. The payload is emitted as ``message`` to ``thread-<threadId>``.
5. The very same dict is returned for the HTTP response body.

The steps are not atomic with respect to other connections: a disconnect or a
concurrent send to the same thread can interleave between 1 and 4.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from tripmate.core.errors import PersistenceError, ValidationError
from tripmate.realtime.hub import Broadcaster
from tripmate.realtime.protocol import MESSAGE
from tripmate.realtime.rooms import thread_room
from tripmate.schemas.message import DeliveredMessage, FileInfo
from tripmate.services.store import ChatStore

logger = logging.getLogger(__name__)

__all__ = ["MessageDeliveryBridge"]


class MessageDeliveryBridge:
    def __init__(self, store: ChatStore, broadcaster: Broadcaster) -> None:
        self.store = store
        self.broadcaster = broadcaster

    async def deliver(
        self,
        *,
        thread_id: int,
        sender_id: int,
        content: str,
        message_type: str = "text",
        temp_id: Optional[Union[str, int]] = None,
        file_info: Optional[FileInfo] = None,
    ) -> dict:
        errors: dict[str, str] = {}
        if not thread_id:
            errors["threadId"] = "Thread ID is required"
        if not content:
            errors["content"] = "Content is required"
        if errors:
            raise ValidationError("Thread ID and content are required", errors)
        message_type = message_type or "text"

        stored = await self.store.record_message(thread_id, sender_id, message_type, content)
        if stored is None:
            logger.error("Message not persisted", extra={"thread_id": thread_id, "sender_id": sender_id})
            raise PersistenceError("Failed to send message")

        payload = DeliveredMessage(
            id=stored.id,
            tempId=temp_id,
            content=stored.content,
            message_type=stored.message_type,
            sender_id=stored.sender_id,
            created_at=stored.created_at,
            is_read=False,
            threadId=int(thread_id),
            fileInfo=file_info if message_type == "file" else None,
        ).to_payload()

        delivered = await self.broadcaster.emit(MESSAGE, payload, room=thread_room(thread_id))
        logger.info(
            "Message delivered",
            extra={"thread_id": thread_id, "message_id": stored.id, "receivers": delivered},
        )
        return payload
