"""Exceptions raised by the chat room core.

Every check is made before any state is touched, so catching one of these
means the operation had no effect.
"""

from __future__ import annotations


class ChatRoomError(Exception):
    """Base class for all chat room errors."""


# ------------------------------------------------------------------
# Membership and privileges


class NotMember(ChatRoomError):
    """The caller or the target lacks the required membership."""

    def __init__(self, identity: str, room_id: str, role: str = "member") -> None:
        self.identity = identity
        self.room_id = room_id
        self.role = role
        super().__init__(f"{identity} is not {_article(role)} {role} of room {room_id}")


class AlreadyMember(ChatRoomError):
    """Duplicate join or duplicate admin grant."""

    def __init__(self, identity: str, room_id: str, role: str = "member") -> None:
        self.identity = identity
        self.room_id = room_id
        self.role = role
        super().__init__(
            f"{identity} is already {_article(role)} {role} of room {room_id}"
        )


class NotOwner(ChatRoomError):
    """The caller lacks the owner or admin privilege for the transition.

    Also raised when the owner tries to leave the room or when anyone tries
    to demote the owner.
    """

    def __init__(self, identity: str, room_id: str, reason: str) -> None:
        self.identity = identity
        self.room_id = room_id
        self.reason = reason
        super().__init__(f"{identity} cannot {reason} in room {room_id}")


class NotAuthorized(ChatRoomError):
    """A profile was modified by someone other than its owner."""

    def __init__(self, identity: str, profile_id: str) -> None:
        self.identity = identity
        self.profile_id = profile_id
        super().__init__(f"{identity} does not own profile {profile_id}")


# ------------------------------------------------------------------
# Size limits


class _TooLong(ChatRoomError):
    what = "value"

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"{self.what} is {size} bytes, limit is {limit}")


class MessageTooLong(_TooLong):
    what = "Message"


class NameTooLong(_TooLong):
    what = "Room name"


class UsernameTooLong(_TooLong):
    what = "Username"


# ------------------------------------------------------------------
# Lookups


class MessageNotFound(ChatRoomError):
    def __init__(self, message_id: int, room_id: str) -> None:
        self.message_id = message_id
        self.room_id = room_id
        super().__init__(f"Message {message_id} not found in room {room_id}")


class RoomNotFound(ChatRoomError):
    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class ProfileNotFound(ChatRoomError):
    def __init__(self, profile_id: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id} not found")


def _article(word: str) -> str:
    return "an" if word[:1] in "aeiou" else "a"
