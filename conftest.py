"""Shared fixtures for the test-suite."""

import itertools
import os
import sys

import pytest

# Make ``chatroom`` importable when the package is not installed.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)


@pytest.fixture
def clock():
    """A deterministic clock ticking one second per call."""
    ticks = itertools.count(1000)
    return lambda: float(next(ticks))


@pytest.fixture
def ids():
    """Sequential ids: ``id-1``, ``id-2``, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def room(clock, ids):
    from chatroom.core.room import ChatRoom

    created, _ = ChatRoom.create("u1", "R", clock=clock, id_factory=ids)
    return created


@pytest.fixture
def store(clock, ids):
    from chatroom.data.store import ChatStore

    return ChatStore(clock=clock, id_factory=ids)
