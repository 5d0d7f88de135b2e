"""Core package for chat rooms.

This module exposes the room and profile aggregates, the store that keeps
them, and the errors they raise so that consumers of the package can simply
import them from ``chatroom``.
"""

from .core.errors import (
    AlreadyMember,
    ChatRoomError,
    MessageNotFound,
    MessageTooLong,
    NotAuthorized,
    NotMember,
    NotOwner,
)
from .core.models import MAX_MESSAGE_BYTES, Message
from .core.profile import UserProfile
from .core.room import ChatRoom
from .data.store import ChatStore

__all__ = [
    "AlreadyMember",
    "ChatRoom",
    "ChatRoomError",
    "ChatStore",
    "MAX_MESSAGE_BYTES",
    "Message",
    "MessageNotFound",
    "MessageTooLong",
    "NotAuthorized",
    "NotMember",
    "NotOwner",
    "UserProfile",
]
