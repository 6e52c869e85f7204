"""Port interface for the per-guild transient message bookkeeping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from kyvex_music.domain.shared.types import ChannelIdField

if TYPE_CHECKING:
    from ...domain.music.entities import GuildSession, QueueItem
    from ..services.playback_service import EnqueueResult


class MessageRegistry(ABC):
    """Keeps at most one live now-playing message per guild and cleans up queue notices.

    Deletions are best-effort: implementations never raise past these methods
    because a message could not be removed.
    """

    @abstractmethod
    async def on_track_start(self, session: GuildSession, item: QueueItem) -> None:
        """Replace the now-playing message; queue notices are left alone."""
        ...

    @abstractmethod
    async def on_enqueue(
        self, session: GuildSession, result: EnqueueResult, *, channel_id: ChannelIdField
    ) -> None:
        """Post an "added" notice and keep its reference until the next flush."""
        ...

    @abstractmethod
    async def flush(self, session: GuildSession) -> None:
        """Delete the now-playing message and every queue notice."""
        ...

    @abstractmethod
    async def announce(self, session: GuildSession, content: str) -> None:
        """Post an untracked notice in the session's text channel."""
        ...
