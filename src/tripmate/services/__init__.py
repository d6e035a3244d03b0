# Re-export primary service layer entry points for convenience.
from .store import ChatStore, SqlChatStore
from .delivery import MessageDeliveryBridge
from .storage import FileStorage, S3Storage, get_file_storage
from .thread import (
    get_or_create_thread,
    get_thread_for_participant,
    list_thread_messages,
    existing_threads,
    list_conversations,
    ThreadNotFoundError,
    NotAParticipantError,
    UserNotFoundError,
)

__all__ = [
    # persistence
    "ChatStore",
    "SqlChatStore",
    # delivery
    "MessageDeliveryBridge",
    # storage
    "FileStorage",
    "S3Storage",
    "get_file_storage",
    # thread
    "get_or_create_thread",
    "get_thread_for_participant",
    "list_thread_messages",
    "existing_threads",
    "list_conversations",
    "ThreadNotFoundError",
    "NotAParticipantError",
    "UserNotFoundError",
]
