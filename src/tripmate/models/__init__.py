from tripmate.models.user import User
from tripmate.models.thread import Thread
from tripmate.models.message import Message, MESSAGE_TYPES

__all__ = ["User", "Thread", "Message", "MESSAGE_TYPES"]
