"""Mirrors notable bot events as embeds in the configured log channel."""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING

import discord

from kyvex_music.application.interfaces.operations_log import OperationsLog
from kyvex_music.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from kyvex_music.config.settings import DiscordSettings
    from kyvex_music.domain.music.entities import QueueItem

logger = logging.getLogger(__name__)

TRACE_LIMIT = 1500


class LogColors:
    GREEN = 0x2ECC71
    BLUE = 0x3498DB
    RED = 0xE74C3C
    YELLOW = 0xF1C40F
    ORANGE = 0xF39C12


class LogChannelReporter(OperationsLog):
    """Sends operator-facing log embeds. With no channel configured every call is a no-op."""

    def __init__(self, bot: discord.Client, settings: DiscordSettings) -> None:
        self._bot = bot
        self._channel_id = settings.log_channel_id
        self._default_color = settings.embed_color_value
        self._warned_unset = False

    @property
    def enabled(self) -> bool:
        return self._channel_id is not None

    async def send(self, title: str, description: str, color: int | None = None) -> None:
        if self._channel_id is None:
            if not self._warned_unset:
                logger.info(LogTemplates.LOG_CHANNEL_UNSET)
                self._warned_unset = True
            return

        channel = self._bot.get_channel(self._channel_id)
        if channel is None:
            logger.warning(LogTemplates.LOG_CHANNEL_MISSING, self._channel_id)
            return

        embed = discord.Embed(
            title=title,
            description=description[:4000],
            color=self._default_color if color is None else color,
            timestamp=discord.utils.utcnow(),
        )
        embed.set_footer(text=DiscordUIMessages.LOG_FOOTER)

        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.LOG_CHANNEL_SEND_FAILED, self._channel_id, e)

    # ─────────────────────────────────────────────────────────────────
    # OperationsLog
    # ─────────────────────────────────────────────────────────────────

    async def player_event(self, guild_id: int, event: str, item: QueueItem | None = None) -> None:
        description = DiscordUIMessages.LOG_PLAYER_EVENT_BODY.format(event=event, guild_id=guild_id)
        if item is not None:
            description += DiscordUIMessages.LOG_PLAYER_EVENT_TRACK.format(
                title=item.title, uri=item.uri or ""
            )
        await self.send(DiscordUIMessages.LOG_PLAYER_EVENT, description, LogColors.YELLOW)

    async def error(self, source: str, error: BaseException) -> None:
        trace = "".join(traceback.format_exception(error)).strip() or "No stack trace"
        if len(trace) > TRACE_LIMIT:
            trace = "…" + trace[-(TRACE_LIMIT - 1) :]
        await self.send(
            DiscordUIMessages.LOG_ERROR,
            DiscordUIMessages.LOG_ERROR_BODY.format(source=source, message=str(error), trace=trace),
            LogColors.RED,
        )

    # ─────────────────────────────────────────────────────────────────
    # Bot events
    # ─────────────────────────────────────────────────────────────────

    async def bot_started(self, user: discord.abc.User, guild_count: int) -> None:
        await self.send(
            DiscordUIMessages.LOG_BOT_STARTED,
            DiscordUIMessages.LOG_BOT_STARTED_BODY.format(user=user, user_id=user.id, guilds=guild_count),
            LogColors.GREEN,
        )

    async def command_used(self, prefix: str, command: str, message: discord.Message) -> None:
        guild = message.guild
        channel = message.channel
        await self.send(
            DiscordUIMessages.LOG_COMMAND_USED,
            DiscordUIMessages.LOG_COMMAND_USED_BODY.format(
                prefix=prefix,
                command=command,
                user=message.author,
                user_id=message.author.id,
                channel=getattr(channel, "name", "Direct Message"),
                channel_id=channel.id,
                guild=guild.name if guild else "Direct Message",
                guild_id=guild.id if guild else "DM",
            ),
            LogColors.BLUE,
        )

    async def guild_join(self, guild: discord.Guild) -> None:
        await self.send(
            DiscordUIMessages.LOG_GUILD_JOIN,
            DiscordUIMessages.LOG_GUILD_JOIN_BODY.format(
                name=guild.name,
                guild_id=guild.id,
                members=guild.member_count,
                owner=f"<@{guild.owner_id}>" if guild.owner_id else "Unknown",
            ),
            LogColors.GREEN,
        )

    async def guild_leave(self, guild: discord.Guild) -> None:
        await self.send(
            DiscordUIMessages.LOG_GUILD_LEAVE,
            DiscordUIMessages.LOG_GUILD_LEAVE_BODY.format(
                name=guild.name, guild_id=guild.id, members=guild.member_count
            ),
            LogColors.RED,
        )

    async def node_status(self, node: str, status: str) -> None:
        await self.send(
            DiscordUIMessages.LOG_NODE_STATUS,
            DiscordUIMessages.LOG_NODE_STATUS_BODY.format(node=node, status=status),
            LogColors.GREEN if status.lower() == "connected" else LogColors.RED,
        )

    async def activity_changed(self, user: discord.abc.User, activity: str) -> None:
        await self.send(
            DiscordUIMessages.LOG_ACTIVITY_CHANGED,
            DiscordUIMessages.LOG_ACTIVITY_CHANGED_BODY.format(user=user, user_id=user.id, activity=activity),
            LogColors.ORANGE,
        )
