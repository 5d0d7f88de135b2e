"""Tests for the :class:`ChatRoom` state machine."""

import threading

import pytest

from chatroom.core.errors import (
    AlreadyMember,
    MessageNotFound,
    MessageTooLong,
    NameTooLong,
    NotMember,
    NotOwner,
)
from chatroom.core.events import (
    AdminAdded,
    AdminRemoved,
    ChatRoomCreated,
    MemberJoined,
    MemberLeft,
    MessageDeleted,
    MessageSent,
)
from chatroom.core.models import MAX_MESSAGE_BYTES
from chatroom.core.room import ChatRoom


def assert_invariants(room: ChatRoom) -> None:
    members = set(room.get_all_members())
    admins = set(room.get_all_admins())
    assert room.owner in members and room.owner in admins
    assert admins <= members
    assert room.member_count == len(members)
    info = room.get_room_info()
    assert [m.id for m in room.get_messages(0, info.message_count)] == list(
        range(info.message_count)
    )


def test_create_room(clock, ids) -> None:
    """A fresh room has only its owner, as member and admin."""
    room, event = ChatRoom.create("u1", "R", clock=clock, id_factory=ids)
    assert room.member_count == 1
    assert room.message_count == 0
    assert room.is_member("u1") and room.is_admin("u1")
    assert isinstance(event, ChatRoomCreated)
    assert event.room_id == room.id == "id-1"
    assert event.owner == "u1" and event.name == "R"
    assert event.timestamp == room.created_at
    assert_invariants(room)


def test_create_room_name_too_long() -> None:
    with pytest.raises(NameTooLong):
        ChatRoom.create("u1", "x" * 257)


def test_send_message(room: ChatRoom) -> None:
    event = room.send_message("u1", "hello")
    assert isinstance(event, MessageSent)
    assert room.message_count == 1
    msg = room.get_message(0)
    assert msg.sender == "u1"
    assert msg.content == "hello"
    assert event.message_id == 0


def test_message_byte_limit(room: ChatRoom) -> None:
    """The bound counts UTF-8 bytes, not characters."""
    room.send_message("u1", "a" * MAX_MESSAGE_BYTES)
    with pytest.raises(MessageTooLong) as exc:
        room.send_message("u1", "a" * (MAX_MESSAGE_BYTES + 1))
    assert exc.value.size == 1025
    with pytest.raises(MessageTooLong):
        room.send_message("u1", "é" * 513)
    assert room.message_count == 1


def test_non_member_cannot_send(room: ChatRoom) -> None:
    with pytest.raises(NotMember):
        room.send_message("u2", "hi")
    room.join("u2")
    room.send_message("u2", "hi")
    assert room.get_message(0).sender == "u2"


def test_join_twice_fails(room: ChatRoom) -> None:
    assert isinstance(room.join("u2"), MemberJoined)
    with pytest.raises(AlreadyMember):
        room.join("u2")
    assert room.member_count == 2
    with pytest.raises(AlreadyMember):
        room.join("u1")
    assert_invariants(room)


def test_leave(room: ChatRoom) -> None:
    room.join("u2")
    room.add_admin("u1", "u2")
    event = room.leave("u2")
    assert isinstance(event, MemberLeft)
    assert not room.is_member("u2")
    assert not room.is_admin("u2")
    assert room.member_count == 1
    with pytest.raises(NotMember):
        room.leave("u2")
    assert_invariants(room)


def test_owner_cannot_leave(room: ChatRoom) -> None:
    room.join("u2")
    with pytest.raises(NotOwner):
        room.leave("u1")
    assert room.get_all_members() == ["u1", "u2"]


def test_admin_grants_are_transitive(room: ChatRoom) -> None:
    for user in ("u2", "u3"):
        room.join(user)
    added = room.add_admin("u1", "u2")
    assert isinstance(added, AdminAdded) and added.added_by == "u1"
    assert room.add_admin("u2", "u3").added_by == "u2"
    removed = room.remove_admin("u1", "u3")
    assert isinstance(removed, AdminRemoved) and removed.removed_by == "u1"
    assert room.get_all_admins() == ["u1", "u2"]
    assert_invariants(room)


def test_add_admin_errors(room: ChatRoom) -> None:
    room.join("u2")
    room.join("u3")
    with pytest.raises(NotOwner):
        room.add_admin("u2", "u3")
    with pytest.raises(NotMember):
        room.add_admin("u1", "u9")
    room.add_admin("u1", "u2")
    with pytest.raises(AlreadyMember):
        room.add_admin("u1", "u2")
    with pytest.raises(AlreadyMember):
        room.add_admin("u2", "u1")
    assert room.get_all_admins() == ["u1", "u2"]


def test_remove_admin_errors(room: ChatRoom) -> None:
    room.join("u2")
    room.join("u3")
    room.add_admin("u1", "u2")
    room.add_admin("u1", "u3")
    with pytest.raises(NotOwner):
        room.remove_admin("u2", "u3")
    with pytest.raises(NotOwner):
        room.remove_admin("u1", "u1")
    room.remove_admin("u1", "u3")
    with pytest.raises(NotMember):
        room.remove_admin("u1", "u3")
    assert room.is_admin("u2")


def test_delete_message_is_logical(room: ChatRoom) -> None:
    room.join("u2")
    room.send_message("u2", "oops")
    event = room.delete_message("u2", 0)
    assert isinstance(event, MessageDeleted)
    assert event.deleted_by == "u2"
    assert room.message_count == 1
    assert room.get_message(0).content == "oops"


def test_delete_message_permissions(room: ChatRoom) -> None:
    for user in ("u2", "u3"):
        room.join(user)
    room.send_message("u2", "one")
    with pytest.raises(NotOwner):
        room.delete_message("u3", 0)
    assert room.delete_message("u1", 0).deleted_by == "u1"
    room.add_admin("u1", "u3")
    assert room.delete_message("u3", 0).deleted_by == "u3"
    with pytest.raises(MessageNotFound):
        room.delete_message("u1", 1)


def test_former_member_can_delete_own_message(room: ChatRoom) -> None:
    room.join("u2")
    room.send_message("u2", "bye")
    room.leave("u2")
    assert room.delete_message("u2", 0).message_id == 0


@pytest.mark.parametrize(
    ("start", "limit", "expected"),
    [
        (0, 10, [0, 1, 2, 3, 4]),
        (1, 2, [1, 2]),
        (3, 10, [3, 4]),
        (5, 3, []),
        (9, 3, []),
        (2, 0, []),
        (-3, 2, [0, 1]),
        (0, -1, []),
    ],
)
def test_get_messages_pagination(room: ChatRoom, start, limit, expected) -> None:
    for i in range(5):
        room.send_message("u1", f"m{i}")
    page = room.get_messages(start, limit)
    assert [m.id for m in page] == expected
    assert [m.content for m in page] == [f"m{i}" for i in expected]


def test_get_message_missing(room: ChatRoom) -> None:
    with pytest.raises(MessageNotFound):
        room.get_message(0)
    with pytest.raises(MessageNotFound):
        room.get_message(-1)


def test_room_info_and_stats(room: ChatRoom) -> None:
    room.join("u2")
    room.send_message("u2", "hi")
    info = room.get_room_info()
    assert (info.name, info.owner, info.message_count, info.member_count) == (
        "R",
        "u1",
        1,
        2,
    )
    stats = room.get_room_stats()
    assert stats.member_count == 2
    assert stats.message_count == 1
    assert stats.created_at == room.created_at


def test_transfer_keeps_owner(room: ChatRoom) -> None:
    """Handing the room over changes custody only."""
    room.join("u2")
    room.transfer("u2")
    assert room.custodian == "u2"
    assert room.owner == "u1"
    with pytest.raises(NotOwner):
        room.remove_admin("u2", "u1")
    with pytest.raises(NotOwner):
        room.leave("u1")
    room.add_admin("u1", "u2")
    assert room.remove_admin("u1", "u2").removed_by == "u1"


def test_concurrent_sends_keep_log_dense(room: ChatRoom) -> None:
    users = [f"u{i}" for i in range(2, 10)]
    for user in users:
        room.join(user)

    def spam(user: str) -> None:
        for n in range(50):
            room.send_message(user, f"{user}-{n}")

    threads = [threading.Thread(target=spam, args=(u,)) for u in users]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert room.message_count == 400
    assert_invariants(room)
