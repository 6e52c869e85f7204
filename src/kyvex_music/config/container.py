"""Dependency Injection Container

Builds the application's collaborators lazily and caches them for reuse.
Discord-bound adapters need the bot, so ``set_bot`` must run before they are
first accessed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.queue_service import QueueApplicationService
    from ..domain.guild.repository import PrefixRepository
    from ..domain.music.repository import SessionRepository
    from ..infrastructure.audio.wavelink_backend import WavelinkAudioBackend
    from ..infrastructure.discord.services.command_router import CommandRouter
    from ..infrastructure.discord.services.log_channel import LogChannelReporter
    from ..infrastructure.discord.services.message_registry import DiscordMessageRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container; components are created on first access."""

    settings: Settings
    _bot: Bot | None = None

    # Persistence
    _session_repository: SessionRepository | None = None
    _prefix_store: PrefixRepository | None = None

    # Infrastructure adapters
    _audio_backend: WavelinkAudioBackend | None = None
    _log_reporter: LogChannelReporter | None = None
    _message_registry: DiscordMessageRegistry | None = None

    # Application services
    _playback_service: PlaybackApplicationService | None = None
    _queue_service: QueueApplicationService | None = None

    # Command handling
    _command_router: CommandRouter | None = None

    def set_bot(self, bot: Bot) -> None:
        self._bot = bot

    @property
    def bot(self) -> Bot:
        if self._bot is None:
            raise RuntimeError("Bot not initialized. Call set_bot() first.")
        return self._bot

    # === Persistence ===

    @property
    def session_repository(self) -> SessionRepository:
        if self._session_repository is None:
            from ..infrastructure.persistence.session_store import InMemorySessionRepository

            self._session_repository = InMemorySessionRepository()
        return self._session_repository

    @property
    def prefix_store(self) -> PrefixRepository:
        if self._prefix_store is None:
            from ..infrastructure.persistence.prefix_store import JsonPrefixStore

            self._prefix_store = JsonPrefixStore(
                self.settings.storage.prefixes_path,
                default_prefix=self.settings.discord.command_prefix,
            )
        return self._prefix_store

    # === Infrastructure ===

    @property
    def audio_backend(self) -> WavelinkAudioBackend:
        if self._audio_backend is None:
            from ..infrastructure.audio.wavelink_backend import WavelinkAudioBackend

            self._audio_backend = WavelinkAudioBackend(self.bot, self.settings.lavalink)
        return self._audio_backend

    @property
    def log_reporter(self) -> LogChannelReporter:
        if self._log_reporter is None:
            from ..infrastructure.discord.services.log_channel import LogChannelReporter

            self._log_reporter = LogChannelReporter(self.bot, self.settings.discord)
        return self._log_reporter

    @property
    def message_registry(self) -> DiscordMessageRegistry:
        if self._message_registry is None:
            from ..infrastructure.discord.services.message_registry import DiscordMessageRegistry
            from ..infrastructure.discord.views.now_playing_view import NowPlayingControls

            self._message_registry = DiscordMessageRegistry(
                self.bot,
                embed_color=self.settings.discord.embed_color_value,
                view_factory=lambda session: NowPlayingControls(
                    guild_id=session.guild_id, container=self
                ),
            )
        return self._message_registry

    # === Application Services ===

    @property
    def playback_service(self) -> PlaybackApplicationService:
        if self._playback_service is None:
            from ..application.services.playback_service import PlaybackApplicationService

            self._playback_service = PlaybackApplicationService(
                session_repository=self.session_repository,
                audio_backend=self.audio_backend,
                message_registry=self.message_registry,
                operations_log=self.log_reporter,
                default_volume=self.settings.audio.default_volume,
            )
        return self._playback_service

    @property
    def queue_service(self) -> QueueApplicationService:
        if self._queue_service is None:
            from ..application.services.queue_service import QueueApplicationService

            self._queue_service = QueueApplicationService(
                session_repository=self.session_repository,
                page_size=self.settings.audio.queue_page_size,
            )
        return self._queue_service

    @property
    def command_router(self) -> CommandRouter:
        if self._command_router is None:
            from ..infrastructure.discord.services.command_router import CommandRouter

            self._command_router = CommandRouter(
                self.bot,
                playback_service=self.playback_service,
                queue_service=self.queue_service,
                prefix_store=self.prefix_store,
                session_repository=self.session_repository,
                log_reporter=self.log_reporter,
                settings=self.settings.discord,
            )
        return self._command_router

    # === Lifecycle ===

    def initialize(self) -> None:
        """Load on-disk state."""
        self.prefix_store.load()

    async def shutdown(self) -> None:
        """End live sessions so their chat messages and players are cleaned up."""
        if self._playback_service is not None:
            await self._playback_service.shutdown()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
