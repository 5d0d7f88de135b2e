"""Domain events returned by every successful mutation.

Events are plain values: the aggregates return them and the store queues
them for external observers (see :mod:`chatroom.adapters`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Event(BaseModel):
    """Common base for all domain events."""

    model_config = ConfigDict(frozen=True)

    timestamp: float


class UserRegistered(Event):
    identity: str
    username: str


class UsernameUpdated(Event):
    identity: str
    old_username: str
    new_username: str


class ChatRoomCreated(Event):
    room_id: str
    name: str
    owner: str


class MessageSent(Event):
    room_id: str
    message_id: int
    sender: str
    content: str


class MemberJoined(Event):
    room_id: str
    member: str


class MemberLeft(Event):
    room_id: str
    member: str


class AdminAdded(Event):
    room_id: str
    admin: str
    added_by: str


class AdminRemoved(Event):
    room_id: str
    admin: str
    removed_by: str


class MessageDeleted(Event):
    room_id: str
    message_id: int
    deleted_by: str


def describe(event: Event) -> str:
    """Return a one-line human readable summary of ``event``."""
    match event:
        case UserRegistered():
            return f"{event.identity} registered as {event.username}"
        case UsernameUpdated():
            return (
                f"{event.identity} renamed {event.old_username} "
                f"to {event.new_username}"
            )
        case ChatRoomCreated():
            return f"{event.owner} created room {event.name} ({event.room_id})"
        case MessageSent():
            return (
                f"[{event.room_id}] #{event.message_id} {event.sender}: "
                f"{event.content}"
            )
        case MemberJoined():
            return f"[{event.room_id}] {event.member} joined the room"
        case MemberLeft():
            return f"[{event.room_id}] {event.member} left the room"
        case AdminAdded():
            return f"[{event.room_id}] {event.added_by} made {event.admin} an admin"
        case AdminRemoved():
            return (
                f"[{event.room_id}] {event.removed_by} removed admin "
                f"rights from {event.admin}"
            )
        case MessageDeleted():
            return (
                f"[{event.room_id}] {event.deleted_by} deleted message "
                f"#{event.message_id}"
            )
    return type(event).__name__
