"""Queue Application Service - queue inspection and edits that need no I/O."""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import GuildSession, QueueItem
from ...domain.shared.exceptions import InvalidArgumentError, NotFoundError
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.types import DiscordSnowflake
from ...domain.shared.validators import parse_strict_int

if TYPE_CHECKING:
    from ...domain.music.repository import SessionRepository

logger = logging.getLogger(__name__)


class QueuePage(BaseModel):
    """One page of the pending queue plus totals for the footer."""

    model_config = ConfigDict(frozen=True, strict=True)

    current: QueueItem | None
    items: tuple[QueueItem, ...]
    start_index: int  # 1-indexed position of items[0]
    page: int
    total_pages: int
    total_items: int
    total_duration_ms: int
    stream_count: int


class QueueApplicationService:
    """Synchronous queue operations; each one validates before it mutates."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        page_size: int = 10,
        rng: random.Random | None = None,
    ) -> None:
        self._sessions = session_repository
        self._page_size = page_size
        self._rng = rng

    def _require_session(self, guild_id: DiscordSnowflake) -> GuildSession:
        session = self._sessions.get(guild_id)
        if session is None:
            raise NotFoundError("GuildSession", guild_id, ErrorMessages.NOTHING_PLAYING)
        return session

    def get_page(self, guild_id: DiscordSnowflake, page: int = 1) -> QueuePage:
        session = self._require_session(guild_id)
        queue = session.queue
        if queue.is_empty:
            raise NotFoundError("Queue", guild_id, ErrorMessages.QUEUE_EMPTY)

        total_pages = max(1, math.ceil(queue.length / self._page_size))
        if page < 1 or page > total_pages:
            raise InvalidArgumentError(
                ErrorMessages.INVALID_PAGE.format(pages=total_pages), field="page"
            )

        start = (page - 1) * self._page_size
        return QueuePage(
            current=queue.current,
            items=tuple(queue.pending[start : start + self._page_size]),
            start_index=start + 1,
            page=page,
            total_pages=total_pages,
            total_items=queue.length,
            total_duration_ms=queue.total_duration_ms,
            stream_count=queue.stream_count,
        )

    def remove(self, guild_id: DiscordSnowflake, position: object) -> QueueItem:
        """Remove the item at a 1-indexed position given as raw user input.

        Raises:
            OutOfRangeError: For non-integer or out-of-range positions; the queue is unchanged.
        """
        session = self._require_session(guild_id)
        parsed = parse_strict_int(position)
        # 0 is never valid, so a parse failure reuses the same range error.
        return session.queue.remove_at(parsed if parsed is not None else 0)

    def clear(self, guild_id: DiscordSnowflake) -> int:
        session = self._require_session(guild_id)
        if not session.queue.pending:
            raise NotFoundError("Queue", guild_id, ErrorMessages.QUEUE_ALREADY_EMPTY)
        return session.queue.clear()

    def shuffle(self, guild_id: DiscordSnowflake) -> bool:
        """Shuffle pending items; False when there were fewer than two to shuffle."""
        session = self._require_session(guild_id)
        return session.queue.shuffle(self._rng)
