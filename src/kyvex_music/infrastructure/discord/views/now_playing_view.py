"""Playback control buttons under the now-playing message."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from kyvex_music.application.commands.models import (
    BotCommand,
    LoopCommand,
    QueueCommand,
    SkipCommand,
    StopCommand,
    TogglePauseCommand,
)
from kyvex_music.domain.shared.messages import EmojiConstants, LogTemplates
from kyvex_music.infrastructure.discord.guards.voice_guards import check_control_interaction
from kyvex_music.infrastructure.discord.services.command_router import Invocation
from kyvex_music.infrastructure.discord.views.base_view import BaseInteractiveView

if TYPE_CHECKING:
    from kyvex_music.config.container import Container

logger = logging.getLogger(__name__)


class NowPlayingControls(BaseInteractiveView):
    """Pause/resume, skip, stop, loop and queue buttons for one guild's session.

    Each press runs the same command a chat message would, through the
    router, and answers the presser ephemerally.
    """

    def __init__(self, *, guild_id: int, container: Container, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        self.guild_id = guild_id
        self.container = container

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        session = self.container.session_repository.get(self.guild_id)
        return await check_control_interaction(interaction, session)

    async def _run(self, interaction: discord.Interaction, command: BotCommand) -> None:
        logger.debug(LogTemplates.CONTROL_PRESSED, command.kind, interaction.user.id, self.guild_id)
        await self.container.command_router.dispatch(Invocation.from_interaction(interaction), command)

    @discord.ui.button(emoji=EmojiConstants.PLAY_PAUSE, style=discord.ButtonStyle.secondary, custom_id="np:pause")
    async def pause_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingControls]
    ) -> None:
        await self._run(interaction, TogglePauseCommand())

    @discord.ui.button(emoji=EmojiConstants.SKIP, style=discord.ButtonStyle.secondary, custom_id="np:skip")
    async def skip_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingControls]
    ) -> None:
        await self._run(interaction, SkipCommand())

    @discord.ui.button(emoji=EmojiConstants.STOP, style=discord.ButtonStyle.danger, custom_id="np:stop")
    async def stop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingControls]
    ) -> None:
        await self._run(interaction, StopCommand())

    @discord.ui.button(emoji=EmojiConstants.LOOP, style=discord.ButtonStyle.secondary, custom_id="np:loop")
    async def loop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingControls]
    ) -> None:
        await self._run(interaction, LoopCommand())

    @discord.ui.button(emoji=EmojiConstants.QUEUE, style=discord.ButtonStyle.secondary, custom_id="np:queue")
    async def queue_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingControls]
    ) -> None:
        await self._run(interaction, QueueCommand())
