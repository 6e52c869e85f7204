"""Discord and Lavalink event listeners: player events, voice state, and guild membership."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
import wavelink
from discord.ext import commands

from kyvex_music.domain.music.value_objects import TrackEndReason
from kyvex_music.domain.shared.exceptions import ExternalFailureError
from kyvex_music.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def _guild_id(payload: object) -> int | None:
    player = getattr(payload, "player", None)
    guild = getattr(player, "guild", None)
    return guild.id if guild is not None else None


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Player Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_wavelink_track_start(self, payload: wavelink.TrackStartEventPayload) -> None:
        guild_id = _guild_id(payload)
        if guild_id is None:
            return
        await self.container.playback_service.handle_track_start(guild_id, payload.track.encoded)

    @commands.Cog.listener()
    async def on_wavelink_track_end(self, payload: wavelink.TrackEndEventPayload) -> None:
        guild_id = _guild_id(payload)
        if guild_id is None:
            return

        reason = TrackEndReason.parse(payload.reason)
        if reason is None:
            logger.debug(LogTemplates.TRACK_END_IGNORED, payload.reason, guild_id)
            return

        try:
            await self.container.playback_service.handle_track_end(guild_id, reason)
        except ExternalFailureError as e:
            # The session is already torn down; only the report is left.
            logger.warning(LogTemplates.COMMAND_EXTERNAL_FAILURE, "advance", guild_id, e.source)
            await self.container.log_reporter.error("track end", e.cause or e)

    @commands.Cog.listener()
    async def on_wavelink_track_exception(
        self, payload: wavelink.TrackExceptionEventPayload
    ) -> None:
        logger.warning(LogTemplates.TRACK_EXCEPTION, _guild_id(payload), payload.exception)

    @commands.Cog.listener()
    async def on_wavelink_track_stuck(self, payload: wavelink.TrackStuckEventPayload) -> None:
        logger.warning(LogTemplates.TRACK_STUCK, _guild_id(payload), payload.threshold)

    @commands.Cog.listener()
    async def on_wavelink_node_ready(self, payload: wavelink.NodeReadyEventPayload) -> None:
        logger.info(LogTemplates.NODE_READY, payload.node.identifier, payload.resumed)
        await self.container.log_reporter.node_status(payload.node.identifier, "Connected")

    @commands.Cog.listener()
    async def on_wavelink_node_closed(
        self, node: wavelink.Node, disconnected: list[wavelink.Player]
    ) -> None:
        logger.warning(LogTemplates.NODE_CLOSED, node.identifier)
        await self.container.log_reporter.node_status(node.identifier, "Disconnected")

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        if self.bot.user is None or member.id != self.bot.user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        logger.info(LogTemplates.BOT_VOICE_LEFT, member.guild.id)
        await self.container.playback_service.handle_voice_left(member.guild.id)

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.GUILD_JOINED, guild.name, guild.id)
        await self.container.log_reporter.guild_join(guild)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.GUILD_LEFT, guild.name, guild.id)
        await self.container.playback_service.handle_voice_left(guild.id)
        await self.container.log_reporter.guild_leave(guild)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
