"""User profile aggregate."""

from __future__ import annotations

import logging
import threading

from .errors import NotAuthorized, UsernameTooLong
from .events import UsernameUpdated, UserRegistered
from .models import Clock, IdFactory, ProfileInfo, byte_length, new_id, utc_now

logger = logging.getLogger(__name__)


class UserProfile:
    """A user's display identity, owned by exactly one caller identity.

    Only :meth:`update_username` mutates a profile and only its owner may call
    it. ``max_username_bytes`` is ``None`` unless the embedder opts into a
    bound (see :class:`chatroom.config.Settings`).
    """

    def __init__(
        self,
        profile_id: str,
        owner: str,
        username: str,
        created_at: float,
        *,
        clock: Clock = utc_now,
        max_username_bytes: int | None = None,
    ) -> None:
        self.id = profile_id
        self._owner = owner
        self._username = username
        self._created_at = created_at
        self._clock = clock
        self._max_username_bytes = max_username_bytes
        self._lock = threading.Lock()

    @classmethod
    def register(
        cls,
        caller: str,
        username: str,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        max_username_bytes: int | None = None,
    ) -> tuple[UserProfile, UserRegistered]:
        """Create a profile owned by ``caller``."""
        clock = clock or utc_now
        _check_username(username, max_username_bytes)
        now = clock()
        profile = cls(
            (id_factory or new_id)(),
            caller,
            username,
            now,
            clock=clock,
            max_username_bytes=max_username_bytes,
        )
        logger.debug("Registered profile %s for %s", profile.id, caller)
        return profile, UserRegistered(identity=caller, username=username, timestamp=now)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def username(self) -> str:
        return self._username

    @property
    def created_at(self) -> float:
        return self._created_at

    def update_username(self, caller: str, new_username: str) -> UsernameUpdated:
        """Replace the username; only the owner may do so."""
        with self._lock:
            if caller != self._owner:
                raise NotAuthorized(caller, self.id)
            _check_username(new_username, self._max_username_bytes)
            old = self._username
            self._username = new_username
            return UsernameUpdated(
                identity=caller,
                old_username=old,
                new_username=new_username,
                timestamp=self._clock(),
            )

    def get_info(self) -> ProfileInfo:
        with self._lock:
            return ProfileInfo(
                owner=self._owner, username=self._username, created_at=self._created_at
            )

    def __repr__(self) -> str:
        return f"UserProfile(id={self.id!r}, owner={self._owner!r})"


def _check_username(username: str, limit: int | None) -> None:
    if limit is None:
        return
    size = byte_length(username)
    if size > limit:
        raise UsernameTooLong(size, limit)
