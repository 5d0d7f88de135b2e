"""Value models for the chat room core.

The models are implemented using :mod:`pydantic` so that they provide
runtime validation and convenient serialisation to and from dictionaries.
They are read-only snapshots; the mutable state lives in
:class:`~chatroom.core.room.ChatRoom` and
:class:`~chatroom.core.profile.UserProfile`.
"""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Callable
from datetime import UTC

from pydantic import BaseModel, ConfigDict

MAX_MESSAGE_BYTES = 1024
MAX_ROOM_NAME_BYTES = 256

Clock = Callable[[], float]
IdFactory = Callable[[], str]


def utc_now() -> float:
    """Return the current UTC time as seconds since the epoch."""
    return datetime.datetime.now(tz=UTC).timestamp()


def new_id() -> str:
    """Return a fresh random identifier."""
    return uuid.uuid4().hex


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


class Message(BaseModel):
    """A single entry of a room's message log.

    Attributes
    ----------
    id:
        Position of the message in the log, starting at ``0``.
    sender:
        Identity of the member who sent the message.
    content:
        Message body, at most :data:`MAX_MESSAGE_BYTES` UTF-8 bytes.
    timestamp:
        When the message was appended.

    """

    model_config = ConfigDict(frozen=True)

    id: int
    sender: str
    content: str
    timestamp: float


class RoomInfo(BaseModel):
    """Summary of a room's metadata and counters."""

    model_config = ConfigDict(frozen=True)

    name: str
    owner: str
    created_at: float
    message_count: int
    member_count: int


class RoomStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    member_count: int
    message_count: int
    created_at: float


class ProfileInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    username: str
    created_at: float
