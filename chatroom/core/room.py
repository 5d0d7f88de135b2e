"""The chat room aggregate.

A :class:`ChatRoom` owns its membership set, its admin set and its message
log. Every operation runs inside the room's lock: preconditions are checked
first and the state is only written once all of them passed, so a failed call
never leaves a partial change behind.

Membership per identity moves ``non-member -> member -> admin``. The owner
is fixed at member and admin and cannot leave or be demoted. Any admin may
promote another member; only the owner may demote.
"""

from __future__ import annotations

import logging
import threading

from .errors import (
    AlreadyMember,
    MessageNotFound,
    MessageTooLong,
    NameTooLong,
    NotMember,
    NotOwner,
)
from .events import (
    AdminAdded,
    AdminRemoved,
    ChatRoomCreated,
    MemberJoined,
    MemberLeft,
    MessageDeleted,
    MessageSent,
)
from .models import (
    MAX_MESSAGE_BYTES,
    MAX_ROOM_NAME_BYTES,
    Clock,
    IdFactory,
    Message,
    RoomInfo,
    RoomStats,
    byte_length,
    new_id,
    utc_now,
)

logger = logging.getLogger(__name__)


class ChatRoom:
    """Room metadata, membership, moderation rights and the message log."""

    def __init__(
        self,
        room_id: str,
        name: str,
        owner: str,
        created_at: float,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.id = room_id
        self._name = name
        self._owner = owner
        self._created_at = created_at
        self._clock = clock
        # Storage custody only; authorization always goes through ``_owner``.
        self._custodian = owner
        self._members: set[str] = {owner}
        self._admins: set[str] = {owner}
        self._messages: list[Message] = []
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        caller: str,
        name: str,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
    ) -> tuple[ChatRoom, ChatRoomCreated]:
        """Create a room owned by ``caller``."""
        size = byte_length(name)
        if size > MAX_ROOM_NAME_BYTES:
            raise NameTooLong(size, MAX_ROOM_NAME_BYTES)
        clock = clock or utc_now
        now = clock()
        room = cls((id_factory or new_id)(), name, caller, now, clock=clock)
        event = ChatRoomCreated(room_id=room.id, name=name, owner=caller, timestamp=now)
        return room, event

    # ------------------------------------------------------------------
    # Metadata

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def created_at(self) -> float:
        return self._created_at

    @property
    def custodian(self) -> str:
        return self._custodian

    @property
    def member_count(self) -> int:
        with self._lock:
            return len(self._members)

    @property
    def message_count(self) -> int:
        with self._lock:
            return len(self._messages)

    def transfer(self, new_holder: str) -> None:
        """Hand storage custody of the room to ``new_holder``.

        This does not touch :attr:`owner`: the creator keeps every owner
        privilege no matter who holds the room.
        """
        with self._lock:
            previous = self._custodian
            self._custodian = new_holder
        logger.debug("Room %s handed from %s to %s", self.id, previous, new_holder)

    # ------------------------------------------------------------------
    # Membership

    def join(self, caller: str) -> MemberJoined:
        with self._lock:
            if caller in self._members:
                raise AlreadyMember(caller, self.id)
            self._members.add(caller)
            return MemberJoined(room_id=self.id, member=caller, timestamp=self._clock())

    def leave(self, caller: str) -> MemberLeft:
        """Remove ``caller`` from the room, dropping admin rights with it."""
        with self._lock:
            if caller not in self._members:
                raise NotMember(caller, self.id)
            if caller == self._owner:
                raise NotOwner(caller, self.id, "leave a room they own")
            self._members.discard(caller)
            self._admins.discard(caller)
            return MemberLeft(room_id=self.id, member=caller, timestamp=self._clock())

    def add_admin(self, caller: str, target: str) -> AdminAdded:
        """Promote ``target``. The owner and every admin may do this."""
        with self._lock:
            if caller != self._owner and caller not in self._admins:
                raise NotOwner(caller, self.id, "grant admin rights")
            if target not in self._members:
                raise NotMember(target, self.id)
            if target in self._admins:
                raise AlreadyMember(target, self.id, role="admin")
            self._admins.add(target)
            return AdminAdded(
                room_id=self.id, admin=target, added_by=caller, timestamp=self._clock()
            )

    def remove_admin(self, caller: str, target: str) -> AdminRemoved:
        """Demote ``target``. Only the owner may do this."""
        with self._lock:
            if caller != self._owner:
                raise NotOwner(caller, self.id, "revoke admin rights")
            if target == self._owner:
                raise NotOwner(caller, self.id, "demote the room owner")
            if target not in self._admins:
                raise NotMember(target, self.id, role="admin")
            self._admins.discard(target)
            return AdminRemoved(
                room_id=self.id,
                admin=target,
                removed_by=caller,
                timestamp=self._clock(),
            )

    def is_member(self, identity: str) -> bool:
        with self._lock:
            return identity in self._members

    def is_admin(self, identity: str) -> bool:
        with self._lock:
            return identity in self._admins

    def get_all_members(self) -> list[str]:
        with self._lock:
            return sorted(self._members)

    def get_all_admins(self) -> list[str]:
        with self._lock:
            return sorted(self._admins)

    # ------------------------------------------------------------------
    # Message log

    def send_message(self, caller: str, content: str) -> MessageSent:
        """Append ``content`` to the log on behalf of a current member."""
        with self._lock:
            if caller not in self._members:
                raise NotMember(caller, self.id)
            size = byte_length(content)
            if size > MAX_MESSAGE_BYTES:
                raise MessageTooLong(size, MAX_MESSAGE_BYTES)
            message = Message(
                id=len(self._messages),
                sender=caller,
                content=content,
                timestamp=self._clock(),
            )
            self._messages.append(message)
            return MessageSent(
                room_id=self.id,
                message_id=message.id,
                sender=caller,
                content=content,
                timestamp=message.timestamp,
            )

    def delete_message(self, caller: str, message_id: int) -> MessageDeleted:
        """Announce the deletion of a message.

        The stored message is kept as is and :attr:`message_count` does not
        change; observers receiving :class:`MessageDeleted` are expected to
        hide it.
        """
        with self._lock:
            message = self._lookup(message_id)
            if (
                caller != self._owner
                and caller not in self._admins
                and caller != message.sender
            ):
                raise NotOwner(caller, self.id, f"delete message {message_id}")
            return MessageDeleted(
                room_id=self.id,
                message_id=message_id,
                deleted_by=caller,
                timestamp=self._clock(),
            )

    def get_messages(self, start: int, limit: int) -> list[Message]:
        """Return up to ``limit`` messages starting at index ``start``."""
        start = max(start, 0)
        limit = max(limit, 0)
        with self._lock:
            return self._messages[start : start + limit]

    def get_message(self, message_id: int) -> Message:
        with self._lock:
            return self._lookup(message_id)

    def get_room_info(self) -> RoomInfo:
        with self._lock:
            return RoomInfo(
                name=self._name,
                owner=self._owner,
                created_at=self._created_at,
                message_count=len(self._messages),
                member_count=len(self._members),
            )

    def get_room_stats(self) -> RoomStats:
        with self._lock:
            return RoomStats(
                member_count=len(self._members),
                message_count=len(self._messages),
                created_at=self._created_at,
            )

    # ------------------------------------------------------------------
    # Internal helpers

    def _lookup(self, message_id: int) -> Message:
        if not 0 <= message_id < len(self._messages):
            raise MessageNotFound(message_id, self.id)
        return self._messages[message_id]

    def __repr__(self) -> str:
        return f"ChatRoom(id={self.id!r}, name={self._name!r}, owner={self._owner!r})"
