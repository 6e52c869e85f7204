"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for session storage.
Implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from kyvex_music.domain.music.entities import GuildSession


class SessionRepository(ABC):
    """Abstract store for live guild sessions.

    Every method is synchronous: a caller can look a session up, check its
    state, and mutate it without yielding to the event loop in between.
    """

    @abstractmethod
    def get(self, guild_id: int) -> GuildSession | None:
        """Retrieve the session for a guild, if one is live."""
        ...

    @abstractmethod
    def get_or_create(
        self, guild_id: int, *, voice_channel_id: int, text_channel_id: int, volume: int = 100
    ) -> tuple[GuildSession, bool]:
        """Return the guild's session, creating one bound to the given channels if needed.

        Returns:
            The session and whether it was created by this call.
        """
        ...

    @abstractmethod
    def delete(self, guild_id: int) -> GuildSession | None:
        """Remove and return the guild's session."""
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[GuildSession]:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...
