"""Base adapter interface for external event observers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.events import Event


class EventSink(ABC):
    """Abstract destination for domain events (indexers, chat relays, ...)."""

    @abstractmethod
    async def publish(self, event: Event) -> None:
        """Deliver ``event`` to the observer."""
