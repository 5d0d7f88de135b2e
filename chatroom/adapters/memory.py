"""In-process sink that simply records what it receives."""

from __future__ import annotations

from ..core.events import Event
from .base import EventSink


class MemorySink(EventSink):
    def __init__(self) -> None:
        self.events: list[Event] = []

    async def publish(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, kind: type[Event]) -> list[Event]:
        """Return the recorded events that are instances of ``kind``."""
        return [e for e in self.events if isinstance(e, kind)]
