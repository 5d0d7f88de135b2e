"""Discord relay implementing the :class:`~chatroom.adapters.base.EventSink`.

Each event is posted as a one-line summary to a single channel. The sink
talks to Discord's HTTP API through :mod:`httpx`, which keeps it fully
asynchronous without pulling in a gateway client.
"""

from __future__ import annotations

import httpx

from ..config import Settings
from ..core.events import Event, describe
from .base import EventSink


class DiscordSink(EventSink):
    """Sink that posts event summaries to a Discord channel."""

    api_base = "https://discord.com/api"

    def __init__(
        self, token: str, channel_id: str, client: httpx.AsyncClient | None = None
    ) -> None:
        """Store authentication ``token``, target channel and optional ``client``."""
        self.token = token
        self.channel_id = channel_id
        self.client = client or httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> DiscordSink:
        return cls(settings.discord_token, settings.events_channel_id, client=client)

    # ------------------------------------------------------------------
    async def publish(self, event: Event) -> None:
        """Send the summary of ``event`` to the configured channel.

        Raises :class:`httpx.HTTPStatusError` when Discord rejects the request.
        """
        url = f"{self.api_base}/channels/{self.channel_id}/messages"
        headers = {"Authorization": f"Bot {self.token}"}
        payload = {"content": describe(event)}
        response = await self.client.post(url, json=payload, headers=headers)
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()


def sinks_from_settings(
    settings: Settings, client: httpx.AsyncClient | None = None
) -> list[EventSink]:
    """Return the sinks ``settings`` asks for; empty when relaying is off."""
    if not settings.relay_enabled:
        return []
    return [DiscordSink.from_settings(settings, client=client)]
