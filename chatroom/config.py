import os
from dataclasses import dataclass

@dataclass(frozen=True)
class Settings:
    discord_token: str = ""
    events_channel_id: str = ""
    # None leaves usernames unbounded
    max_username_bytes: int | None = None
    log_level: str = "INFO"

    @property
    def relay_enabled(self) -> bool:
        return bool(self.discord_token and self.events_channel_id)

def load_settings() -> Settings:
    token = os.getenv("CHATROOM_DISCORD_TOKEN", "").strip()
    channel = os.getenv("CHATROOM_EVENTS_CHANNEL", "").strip()
    max_username = os.getenv("CHATROOM_MAX_USERNAME_BYTES", "").strip()
    level = os.getenv("CHATROOM_LOG_LEVEL", "").strip().upper()
    return Settings(
        discord_token=token,
        events_channel_id=channel,
        max_username_bytes=int(max_username) if max_username else None,
        log_level=level or "INFO",
    )
