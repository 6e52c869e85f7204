"""Playback Application Service - drives the per-guild session and the audio backend together.

Every public coroutine follows the same order: look the session up, validate,
and mutate it synchronously, then await backend and chat I/O. Another command
or player event for the same guild may run while that I/O is outstanding, so
nothing read before an ``await`` is trusted after it without a fresh lookup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import GuildSession, QueueItem
from ...domain.music.value_objects import LoopMode, SessionEndReason, TrackEndReason
from ...domain.shared.exceptions import (
    ExternalFailureError,
    InvalidArgumentError,
    NotFoundError,
)
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.repository import SessionRepository
    from ..interfaces.audio_backend import AudioBackend
    from ..interfaces.message_registry import MessageRegistry
    from ..interfaces.operations_log import OperationsLog

logger = logging.getLogger(__name__)


class EnqueueResult(BaseModel):
    """Outcome of a play request."""

    model_config = ConfigDict(frozen=True, strict=True)

    items: tuple[QueueItem, ...]
    position: int  # 1-indexed pending position of the first item, 0 if it started now
    playlist_name: str | None = None
    playlist_url: str | None = None
    playlist_thumbnail_url: str | None = None

    @property
    def started(self) -> bool:
        return self.position == 0

    @property
    def is_playlist(self) -> bool:
        return self.playlist_name is not None


class SkipResult(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    skipped: QueueItem | None
    next_item: QueueItem | None

    @property
    def session_ended(self) -> bool:
        return self.next_item is None


class PlaybackApplicationService:
    """Orchestrates the session store, the audio backend, and the message registry."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        audio_backend: AudioBackend,
        message_registry: MessageRegistry,
        operations_log: OperationsLog,
        default_volume: int = 100,
    ) -> None:
        self._sessions = session_repository
        self._backend = audio_backend
        self._registry = message_registry
        self._ops = operations_log
        self._default_volume = default_volume

    # ─────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────

    def get_session(self, guild_id: DiscordSnowflake) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def require_session(
        self, guild_id: DiscordSnowflake, message: str = ErrorMessages.NOTHING_PLAYING
    ) -> GuildSession:
        session = self._sessions.get(guild_id)
        if session is None:
            raise NotFoundError("GuildSession", guild_id, message)
        return session

    def position_ms(self, guild_id: DiscordSnowflake) -> int:
        return self._backend.position_ms(guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────

    async def play(
        self,
        *,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake,
        text_channel_id: DiscordSnowflake,
        query: str,
        requester_id: DiscordSnowflake,
        requester_name: str | None = None,
    ) -> EnqueueResult:
        """Resolve ``query``, queue the result, and start playback when idle."""
        query = query.strip()
        if not query:
            raise InvalidArgumentError(ErrorMessages.SEARCH_QUERY_REQUIRED, field="query")

        resolved = await self._backend.resolve(query)
        if resolved.is_empty:
            raise NotFoundError("Track", query, ErrorMessages.NO_RESULTS)

        items = resolved.items if resolved.is_playlist else resolved.items[:1]
        items = tuple(item.with_requester(requester_id, requester_name) for item in items)

        if not self._backend.is_connected(guild_id):
            existing = self._sessions.get(guild_id)
            channel_id = existing.voice_channel_id if existing else voice_channel_id
            await self._backend.connect(guild_id, channel_id)

        session, created = self._sessions.get_or_create(
            guild_id,
            voice_channel_id=voice_channel_id,
            text_channel_id=text_channel_id,
            volume=self._default_volume,
        )
        if created:
            logger.info(LogTemplates.SESSION_CREATED, guild_id, voice_channel_id, text_channel_id)

        position = session.enqueue(*items)
        result = EnqueueResult(
            items=items,
            position=position,
            playlist_name=resolved.playlist_name if resolved.is_playlist else None,
            playlist_url=resolved.playlist_url if resolved.is_playlist else None,
            playlist_thumbnail_url=resolved.playlist_thumbnail_url if resolved.is_playlist else None,
        )
        logger.info(LogTemplates.ITEMS_ENQUEUED, len(items), guild_id)

        await self._registry.on_enqueue(session, result, channel_id=text_channel_id)

        if result.started and session.current is not None:
            await self._start(session, session.current)
        return result

    async def set_paused(self, guild_id: DiscordSnowflake, paused: bool) -> None:
        session = self.require_session(guild_id)
        session.set_paused(paused)

        try:
            await self._backend.pause(guild_id, paused)
        except ExternalFailureError:
            if self._sessions.get(guild_id) is session and session.state.is_active:
                session.set_paused(not paused)
                logger.warning(LogTemplates.PLAYBACK_ROLLBACK, "pause", guild_id)
            raise

        logger.info(
            LogTemplates.PLAYBACK_PAUSED if paused else LogTemplates.PLAYBACK_RESUMED, guild_id
        )

    async def pause(self, guild_id: DiscordSnowflake) -> None:
        await self.set_paused(guild_id, True)

    async def resume(self, guild_id: DiscordSnowflake) -> None:
        await self.set_paused(guild_id, False)

    async def toggle_pause(self, guild_id: DiscordSnowflake) -> bool:
        """Flip between paused and playing; returns True when now paused."""
        session = self.require_session(guild_id)
        paused = not session.is_paused
        await self.set_paused(guild_id, paused)
        return paused

    async def skip(self, guild_id: DiscordSnowflake) -> SkipResult:
        """Advance to the next item, ending the session when nothing follows.

        With loop mode on and nothing pending, the current item is replayed.
        """
        session = self.require_session(guild_id)
        skipped = session.current
        next_item = session.skip()

        if skipped is not None:
            logger.info(LogTemplates.PLAYBACK_SKIPPED, skipped.title, guild_id)

        if next_item is None:
            await self._end_session(session, SessionEndReason.SKIPPED_PAST_END)
        else:
            await self._start(session, next_item)
        return SkipResult(skipped=skipped, next_item=next_item)

    async def stop(self, guild_id: DiscordSnowflake) -> None:
        session = self.require_session(guild_id)
        await self._end_session(session, SessionEndReason.STOPPED)
        await self._ops.player_event(guild_id, DiscordUIMessages.EVENT_SESSION_STOPPED)

    async def set_volume(self, guild_id: DiscordSnowflake, value: object) -> int:
        session = self.require_session(guild_id)
        previous = session.volume
        volume = session.set_volume(value)

        try:
            await self._backend.set_volume(guild_id, volume)
        except ExternalFailureError:
            if self._sessions.get(guild_id) is session and session.volume == volume:
                session.volume = previous
                logger.warning(LogTemplates.PLAYBACK_ROLLBACK, "volume", guild_id)
            raise

        logger.info(LogTemplates.PLAYBACK_VOLUME, volume, guild_id)
        return volume

    def toggle_loop(self, guild_id: DiscordSnowflake) -> LoopMode:
        return self.require_session(guild_id).toggle_loop()

    # ─────────────────────────────────────────────────────────────────
    # Player events
    # ─────────────────────────────────────────────────────────────────

    async def handle_track_start(
        self, guild_id: DiscordSnowflake, track_id: str | None = None
    ) -> None:
        """Refresh the now-playing message for the item the backend just started."""
        session = self._sessions.get(guild_id)
        if session is None or session.current is None:
            return

        item = session.current
        if track_id is not None and item.track_id is not None and item.track_id != track_id:
            # A later skip already replaced this item; its own start event follows.
            logger.debug(LogTemplates.TRACK_START_STALE, track_id, guild_id)
            return

        await self._registry.on_track_start(session, item)
        await self._ops.player_event(guild_id, DiscordUIMessages.EVENT_TRACK_STARTED, item)

    async def handle_track_end(self, guild_id: DiscordSnowflake, reason: TrackEndReason) -> None:
        """Advance after a natural end; ends caused by our own skip/stop are ignored."""
        if not reason.may_start_next:
            logger.debug(LogTemplates.TRACK_END_IGNORED, reason.value, guild_id)
            return

        session = self._sessions.get(guild_id)
        if session is None:
            logger.debug(LogTemplates.TRACK_END_NO_SESSION, guild_id)
            return

        next_item = session.advance()
        if next_item is None:
            await self._queue_ended(session)
            return

        logger.info(LogTemplates.PLAYBACK_ADVANCED, next_item.title, guild_id)
        await self._start(session, next_item)

    async def handle_voice_left(self, guild_id: DiscordSnowflake) -> None:
        """Tear the session down after the bot was disconnected from voice."""
        session = self._sessions.get(guild_id)
        if session is None:
            return
        await self._end_session(session, SessionEndReason.VOICE_LEFT)
        await self._ops.player_event(guild_id, DiscordUIMessages.EVENT_VOICE_LEFT)

    async def shutdown(self) -> None:
        """End every live session (bot shutdown)."""
        for session in list(self._sessions):
            await self._end_session(session, SessionEndReason.SHUTDOWN)

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    async def _start(self, session: GuildSession, item: QueueItem) -> None:
        try:
            await self._backend.play(session.guild_id, item, volume=session.volume)
        except ExternalFailureError:
            if self._sessions.get(session.guild_id) is session:
                await self._end_session(session, SessionEndReason.STOPPED)
            raise
        logger.info(LogTemplates.PLAYBACK_STARTED, item.title, session.guild_id)

    async def _queue_ended(self, session: GuildSession) -> None:
        logger.info(LogTemplates.QUEUE_ENDED, session.guild_id)
        await self._end_session(session, SessionEndReason.QUEUE_ENDED)
        await self._registry.announce(session, DiscordUIMessages.INFO_QUEUE_ENDED)
        await self._ops.player_event(session.guild_id, DiscordUIMessages.EVENT_QUEUE_ENDED)

    async def _end_session(self, session: GuildSession, reason: SessionEndReason) -> None:
        guild_id = session.guild_id
        if self._sessions.get(guild_id) is session:
            self._sessions.delete(guild_id)
        session.end()
        logger.info(LogTemplates.SESSION_DESTROYED, guild_id, reason.value)

        try:
            await self._registry.flush(session)
        finally:
            await self._backend.destroy(guild_id)
