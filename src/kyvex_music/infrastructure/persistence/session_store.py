"""In-memory implementation of the session repository."""

from __future__ import annotations

from collections.abc import Iterator

from kyvex_music.domain.music.entities import GuildSession
from kyvex_music.domain.music.repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    """Live sessions keyed by guild; they do not outlive the process."""

    def __init__(self) -> None:
        self._sessions: dict[int, GuildSession] = {}

    def get(self, guild_id: int) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def get_or_create(
        self, guild_id: int, *, voice_channel_id: int, text_channel_id: int, volume: int = 100
    ) -> tuple[GuildSession, bool]:
        session = self._sessions.get(guild_id)
        if session is not None:
            return session, False

        session = GuildSession(
            guild_id=guild_id,
            voice_channel_id=voice_channel_id,
            text_channel_id=text_channel_id,
            volume=volume,
        )
        self._sessions[guild_id] = session
        return session, True

    def delete(self, guild_id: int) -> GuildSession | None:
        return self._sessions.pop(guild_id, None)

    def __iter__(self) -> Iterator[GuildSession]:
        return iter(list(self._sessions.values()))

    def __len__(self) -> int:
        return len(self._sessions)
