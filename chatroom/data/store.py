"""In-process registry of rooms and profiles."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from typing import TypeVar

from ..adapters.base import EventSink
from ..config import Settings
from ..core.errors import ChatRoomError, ProfileNotFound, RoomNotFound
from ..core.events import Event, describe
from ..core.models import Clock, IdFactory, Message
from ..core.profile import UserProfile
from ..core.room import ChatRoom
from ..logging_config import setup_logging

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Event)


class ChatStore:
    """Keeps rooms and profiles by id and queues the events they produce.

    Each operation looks up its aggregate, delegates to it and appends the
    resulting event to :attr:`outbox`. Errors propagate unchanged; a failed
    operation queues nothing.

    The outbox is unbounded: the embedder is expected to empty it regularly
    through :meth:`drain` or :meth:`relay`.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        max_username_bytes: int | None = None,
    ) -> None:
        self.clock = clock
        self.id_factory = id_factory
        self.max_username_bytes = max_username_bytes
        self._rooms: dict[str, ChatRoom] = {}
        self._profiles: dict[str, UserProfile] = {}
        self.outbox: deque[Event] = deque()
        # Held around each operation and its outbox append so the outbox
        # order matches the order the aggregates applied the changes.
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> ChatStore:
        """Build a store honoring ``settings`` and configure logging."""
        setup_logging(settings.log_level)
        return cls(max_username_bytes=settings.max_username_bytes, **kwargs)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply(self, action: str, op: Callable[[], E]) -> E:
        with self._lock:
            try:
                event = op()
            except ChatRoomError as exc:
                logger.debug("%s rejected: %s", action, exc)
                raise
            self.outbox.append(event)
        logger.info("%s", describe(event))
        return event

    def _record(self, event: Event) -> None:
        with self._lock:
            self.outbox.append(event)
        logger.info("%s", describe(event))

    def get_room(self, room_id: str) -> ChatRoom:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def get_profile(self, profile_id: str) -> UserProfile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFound(profile_id)
        return profile

    # ------------------------------------------------------------------
    # Profile operations
    # ------------------------------------------------------------------
    def register(self, caller: str, username: str) -> UserProfile:
        profile, event = UserProfile.register(
            caller,
            username,
            clock=self.clock,
            id_factory=self.id_factory,
            max_username_bytes=self.max_username_bytes,
        )
        self._profiles[profile.id] = profile
        self._record(event)
        return profile

    def update_username(self, caller: str, profile_id: str, new_username: str) -> None:
        profile = self.get_profile(profile_id)
        self._apply(
            "update_username", lambda: profile.update_username(caller, new_username)
        )

    # ------------------------------------------------------------------
    # Room operations
    # ------------------------------------------------------------------
    def create_room(self, caller: str, name: str) -> ChatRoom:
        room, event = ChatRoom.create(
            caller, name, clock=self.clock, id_factory=self.id_factory
        )
        self._rooms[room.id] = room
        self._record(event)
        return room

    def transfer_room(self, room_id: str, new_holder: str) -> None:
        self.get_room(room_id).transfer(new_holder)

    def join(self, caller: str, room_id: str) -> None:
        room = self.get_room(room_id)
        self._apply("join", lambda: room.join(caller))

    def leave(self, caller: str, room_id: str) -> None:
        room = self.get_room(room_id)
        self._apply("leave", lambda: room.leave(caller))

    def add_admin(self, caller: str, room_id: str, target: str) -> None:
        room = self.get_room(room_id)
        self._apply("add_admin", lambda: room.add_admin(caller, target))

    def remove_admin(self, caller: str, room_id: str, target: str) -> None:
        room = self.get_room(room_id)
        self._apply("remove_admin", lambda: room.remove_admin(caller, target))

    def send_message(self, caller: str, room_id: str, content: str) -> int:
        """Send ``content`` and return the new message id."""
        room = self.get_room(room_id)
        event = self._apply("send_message", lambda: room.send_message(caller, content))
        return event.message_id

    def delete_message(self, caller: str, room_id: str, message_id: int) -> None:
        room = self.get_room(room_id)
        self._apply("delete_message", lambda: room.delete_message(caller, message_id))

    def get_messages(self, room_id: str, start: int = 0, limit: int = 50) -> list[Message]:
        return self.get_room(room_id).get_messages(start, limit)

    # ------------------------------------------------------------------
    # Event relaying
    # ------------------------------------------------------------------
    def drain(self) -> list[Event]:
        """Return all queued events and empty the outbox."""
        with self._lock:
            events = list(self.outbox)
            self.outbox.clear()
        return events

    async def relay(self, sinks: Iterable[EventSink]) -> int:
        """Publish queued events to every sink, oldest first.

        An event leaves the outbox only once every sink accepted it, so a
        failing sink can be retried by calling :meth:`relay` again.
        """
        sinks = list(sinks)
        relayed = 0
        while True:
            with self._lock:
                if not self.outbox:
                    break
                event = self.outbox[0]
            for sink in sinks:
                await sink.publish(event)
            with self._lock:
                # A concurrent drain may already have taken it.
                if self.outbox and self.outbox[0] is event:
                    self.outbox.popleft()
            relayed += 1
        return relayed
