"""Routes prefixed chat messages and control-button presses to playback and queue operations."""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import discord
import psutil

from kyvex_music.application.commands.models import (
    COMMANDS,
    BotCommand,
    ClearCommand,
    HelpCommand,
    LoopCommand,
    NowPlayingCommand,
    PauseCommand,
    PingCommand,
    PlayCommand,
    PrefixCommand,
    QueueCommand,
    RemoveCommand,
    ResumeCommand,
    SetActivityCommand,
    ShuffleCommand,
    SkipCommand,
    StatusCommand,
    StopCommand,
    TogglePauseCommand,
    UpdatesCommand,
    UptimeCommand,
    VolumeCommand,
)
from kyvex_music.application.commands.parser import parse_command
from kyvex_music.domain.music.value_objects import LoopMode
from kyvex_music.domain.shared.changelog import BOT_UPDATES
from kyvex_music.domain.shared.exceptions import (
    DomainError,
    ExternalFailureError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
)
from kyvex_music.domain.shared.messages import (
    DiscordUIMessages,
    EmojiConstants,
    ErrorMessages,
    LogTemplates,
)
from kyvex_music.domain.shared.validators import parse_strict_int
from kyvex_music.infrastructure.discord import embeds
from kyvex_music.infrastructure.discord.guards.voice_guards import (
    is_bot_owner,
    is_guild_admin,
    send_ephemeral,
    voice_channel_id,
)
from kyvex_music.utils.reply import format_bytes, format_uptime

if TYPE_CHECKING:
    from kyvex_music.application.services.playback_service import PlaybackApplicationService
    from kyvex_music.application.services.queue_service import QueueApplicationService
    from kyvex_music.config.settings import DiscordSettings
    from kyvex_music.domain.guild.repository import PrefixRepository
    from kyvex_music.domain.music.repository import SessionRepository
    from kyvex_music.infrastructure.discord.services.log_channel import LogChannelReporter

logger = logging.getLogger(__name__)

Reply = Callable[..., Awaitable[Any]]

TWITCH_URL = re.compile(r"^https://(www\.)?twitch\.tv/[a-zA-Z0-9_]+$", re.IGNORECASE)
YOUTUBE_URL = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.*$", re.IGNORECASE)

_ACTIVITY_TYPES: dict[str, discord.ActivityType] = {
    "playing": discord.ActivityType.playing,
    "listening": discord.ActivityType.listening,
    "watching": discord.ActivityType.watching,
    "competing": discord.ActivityType.competing,
}


@dataclass(frozen=True)
class Invocation:
    """Who asked for a command, where, and how to answer them."""

    guild: discord.Guild
    member: discord.Member
    channel_id: int
    reply: Reply

    @classmethod
    def from_message(cls, message: discord.Message) -> Invocation:
        async def reply(content: str | None = None, *, embed: discord.Embed | None = None) -> None:
            await message.channel.send(content=content, embed=embed)

        if message.guild is None:
            raise PreconditionFailedError(ErrorMessages.SERVER_ONLY)
        return cls(
            guild=message.guild,
            member=message.author,  # type: ignore[arg-type]
            channel_id=message.channel.id,
            reply=reply,
        )

    @classmethod
    def from_interaction(cls, interaction: discord.Interaction) -> Invocation:
        async def reply(content: str | None = None, *, embed: discord.Embed | None = None) -> None:
            await send_ephemeral(interaction, content, embed=embed)

        if interaction.guild is None or interaction.channel_id is None:
            raise PreconditionFailedError(ErrorMessages.SERVER_ONLY)
        return cls(
            guild=interaction.guild,
            member=interaction.user,  # type: ignore[arg-type]
            channel_id=interaction.channel_id,
            reply=reply,
        )


def _success(message: str) -> str:
    return DiscordUIMessages.NOTICE_SUCCESS.format(message=message)


def _error(message: str) -> str:
    return DiscordUIMessages.NOTICE_ERROR.format(message=message)


class CommandRouter:
    """Resolves the guild's prefix, parses the command, checks who may run it, and runs it.

    Every ``DomainError`` raised by an operation becomes a ``❌`` notice for the
    invoker. External failures and unexpected exceptions are also reported to
    the log channel.
    """

    def __init__(
        self,
        bot: discord.Client,
        *,
        playback_service: PlaybackApplicationService,
        queue_service: QueueApplicationService,
        prefix_store: PrefixRepository,
        session_repository: SessionRepository,
        log_reporter: LogChannelReporter,
        settings: DiscordSettings,
    ) -> None:
        self._bot = bot
        self._playback = playback_service
        self._queue = queue_service
        self._prefixes = prefix_store
        self._sessions = session_repository
        self._reporter = log_reporter
        self._owner_ids = settings.owner_ids
        self._color = settings.embed_color_value

    # ─────────────────────────────────────────────────────────────────
    # Entry points
    # ─────────────────────────────────────────────────────────────────

    def prefix_for(self, guild_id: int | None) -> str:
        return self._prefixes.get(guild_id)

    async def handle_message(self, message: discord.Message) -> bool:
        """Run the command in ``message``; False when it is not a command for this guild."""
        if message.author.bot or message.guild is None:
            return False

        prefix = self.prefix_for(message.guild.id)
        command = parse_command(message.content, prefix)
        if command is None:
            return False

        logger.info(LogTemplates.COMMAND_RECEIVED, command.kind, message.author.id, message.guild.id)
        await self._reporter.command_used(prefix, command.kind, message)
        await self.dispatch(Invocation.from_message(message), command)
        return True

    async def dispatch(self, invocation: Invocation, command: BotCommand) -> None:
        guild_id = invocation.guild.id
        try:
            self._check_preconditions(invocation, command)
            await self._execute(invocation, command)
        except ExternalFailureError as e:
            logger.warning(LogTemplates.COMMAND_EXTERNAL_FAILURE, command.kind, guild_id, e.source)
            await self._reporter.error(f"{command.kind} command ({e.source})", e.cause or e)
            await self._safe_reply(invocation, _error(e.message))
        except DomainError as e:
            logger.info(LogTemplates.COMMAND_REJECTED, command.kind, guild_id, e.message)
            await self._safe_reply(invocation, _error(e.message))
        except Exception as e:
            logger.exception(LogTemplates.COMMAND_UNEXPECTED_ERROR, command.kind, guild_id)
            await self._reporter.error(f"{command.kind} command", e)
            await self._safe_reply(invocation, _error(ErrorMessages.COMMAND_FAILED))

    async def _safe_reply(self, invocation: Invocation, content: str) -> None:
        try:
            await invocation.reply(content)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, invocation.channel_id, e)

    # ─────────────────────────────────────────────────────────────────
    # Checks
    # ─────────────────────────────────────────────────────────────────

    def _check_preconditions(self, invocation: Invocation, command: BotCommand) -> None:
        if command.requires_voice and voice_channel_id(invocation.member) is None:
            raise PreconditionFailedError(ErrorMessages.NOT_IN_VOICE)

    def is_owner(self, user_id: int) -> bool:
        return is_bot_owner(self._bot, user_id, self._owner_ids)

    def _require_owner(self, invocation: Invocation) -> None:
        if not self.is_owner(invocation.member.id):
            raise PermissionDeniedError(ErrorMessages.PERMISSION_DENIED)

    def _require_owner_or_admin(self, invocation: Invocation) -> None:
        if not (self.is_owner(invocation.member.id) or is_guild_admin(invocation.member)):
            raise PermissionDeniedError(ErrorMessages.PERMISSION_DENIED)

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    async def _execute(self, invocation: Invocation, command: BotCommand) -> None:
        guild_id = invocation.guild.id
        reply = invocation.reply

        match command:
            case PlayCommand(query=query):
                member = invocation.member
                await self._playback.play(
                    guild_id=guild_id,
                    voice_channel_id=voice_channel_id(member),  # type: ignore[arg-type]
                    text_channel_id=invocation.channel_id,
                    query=query,
                    requester_id=member.id,
                    requester_name=getattr(member, "display_name", None) or str(member),
                )

            case PauseCommand():
                await self._playback.pause(guild_id)
                await reply(_success(DiscordUIMessages.SUCCESS_PAUSED))

            case ResumeCommand():
                await self._playback.resume(guild_id)
                await reply(_success(DiscordUIMessages.SUCCESS_RESUMED))

            case TogglePauseCommand():
                paused = await self._playback.toggle_pause(guild_id)
                await reply(
                    _success(DiscordUIMessages.SUCCESS_PAUSED if paused else DiscordUIMessages.SUCCESS_RESUMED)
                )

            case SkipCommand():
                await self._playback.skip(guild_id)
                await reply(_success(DiscordUIMessages.SUCCESS_SKIPPED))

            case StopCommand():
                await self._playback.stop(guild_id)
                await reply(_success(DiscordUIMessages.SUCCESS_STOPPED))

            case VolumeCommand(level=level):
                volume = await self._playback.set_volume(guild_id, level)
                await reply(_success(DiscordUIMessages.SUCCESS_VOLUME.format(volume=volume)))

            case LoopCommand():
                mode = self._playback.toggle_loop(guild_id)
                message = (
                    DiscordUIMessages.SUCCESS_LOOP_ENABLED
                    if mode is LoopMode.QUEUE
                    else DiscordUIMessages.SUCCESS_LOOP_DISABLED
                )
                await reply(_success(message))

            case QueueCommand(page=page):
                number = 1 if page is None else (parse_strict_int(page) or 0)
                queue_page = self._queue.get_page(guild_id, number)
                await reply(embed=embeds.queue_embed(queue_page, color=self._color))

            case NowPlayingCommand():
                session = self._playback.require_session(guild_id)
                if session.current is None:
                    raise NotFoundError("QueueItem", guild_id, ErrorMessages.NO_CURRENT_TRACK)
                await reply(embed=embeds.now_playing_embed(session.current, color=self._color))

            case ShuffleCommand():
                if not self._queue.shuffle(guild_id):
                    raise PreconditionFailedError(ErrorMessages.NOT_ENOUGH_TO_SHUFFLE)
                await reply(_success(DiscordUIMessages.SUCCESS_SHUFFLED))

            case RemoveCommand(position=position):
                removed = self._queue.remove(guild_id, position)
                await reply(_success(DiscordUIMessages.SUCCESS_REMOVED.format(title=removed.title)))

            case ClearCommand():
                self._queue.clear(guild_id)
                await reply(_success(DiscordUIMessages.SUCCESS_CLEARED))

            case StatusCommand():
                session = self._playback.require_session(guild_id, ErrorMessages.NO_ACTIVE_PLAYER)
                embed = embeds.status_embed(
                    session, position_ms=self._playback.position_ms(guild_id), color=self._color
                )
                await reply(embed=embed)

            case PrefixCommand(new_prefix=new_prefix):
                await self._change_prefix(invocation, new_prefix)

            case SetActivityCommand():
                await self._set_activity(invocation, command)

            case PingCommand():
                await reply(self._ping_text())

            case UptimeCommand():
                await reply(embed=self._uptime_embed())

            case UpdatesCommand():
                if not BOT_UPDATES:
                    raise NotFoundError("Changelog", "updates", DiscordUIMessages.INFO_NO_UPDATES)
                await reply(embed=embeds.updates_embed(BOT_UPDATES, color=self._color))

            case HelpCommand():
                prefix = self.prefix_for(guild_id)
                await reply(embed=embeds.help_embed(COMMANDS, prefix=prefix, color=self._color))

    # ─────────────────────────────────────────────────────────────────
    # Administration
    # ─────────────────────────────────────────────────────────────────

    async def _change_prefix(self, invocation: Invocation, new_prefix: str | None) -> None:
        self._require_owner_or_admin(invocation)
        guild_id = invocation.guild.id

        if new_prefix is None:
            current = self.prefix_for(guild_id)
            await invocation.reply(
                DiscordUIMessages.NOTICE_INFO.format(
                    message=DiscordUIMessages.INFO_CURRENT_PREFIX.format(prefix=current)
                )
            )
            return

        self._prefixes.set(guild_id, new_prefix)
        await invocation.reply(_success(DiscordUIMessages.SUCCESS_PREFIX_SET.format(prefix=new_prefix)))

    def build_activity(
        self, command: SetActivityCommand, prefix: str
    ) -> tuple[discord.BaseActivity, str, str | None]:
        """Turn ``setactivity`` arguments into a presence activity, its name, and its URL."""
        kind = command.activity_type
        words = list(command.words)
        url: str | None = None

        if kind == "streaming":
            if not words:
                raise InvalidArgumentError(
                    ErrorMessages.ACTIVITY_STREAMING_URL_REQUIRED.format(prefix=prefix), field="url"
                )
            if words[-1].startswith(("http://", "https://")):
                url = words.pop()

        name = " ".join(words)
        if not kind or not name:
            usage = (
                ErrorMessages.ACTIVITY_STREAMING_USAGE
                if kind == "streaming"
                else ErrorMessages.ACTIVITY_USAGE
            )
            raise InvalidArgumentError(usage.format(prefix=prefix), field="name")

        if kind == "streaming":
            if url is None:
                raise InvalidArgumentError(
                    ErrorMessages.ACTIVITY_STREAMING_URL_REQUIRED.format(prefix=prefix), field="url"
                )
            if not (TWITCH_URL.match(url) or YOUTUBE_URL.match(url)):
                raise InvalidArgumentError(ErrorMessages.ACTIVITY_STREAMING_URL_INVALID, field="url")
            return discord.Streaming(name=name, url=url), name, url

        activity_type = _ACTIVITY_TYPES.get(kind)
        if activity_type is None:
            raise InvalidArgumentError(ErrorMessages.ACTIVITY_TYPE_INVALID, field="type")
        return discord.Activity(type=activity_type, name=name), name, None

    async def _set_activity(self, invocation: Invocation, command: SetActivityCommand) -> None:
        self._require_owner(invocation)
        prefix = self.prefix_for(invocation.guild.id)
        activity, name, url = self.build_activity(command, prefix)

        await self._bot.change_presence(activity=activity)
        label = command.activity_type.capitalize()
        logger.info(LogTemplates.ACTIVITY_CHANGED, invocation.member.id, label, name)

        if url is None:
            notice = DiscordUIMessages.SUCCESS_ACTIVITY_SET.format(activity_type=label, name=name)
            described = f"{label} {name}"
        else:
            notice = DiscordUIMessages.SUCCESS_ACTIVITY_SET_URL.format(
                activity_type=label, name=name, url=url
            )
            described = f"{label} {name} (URL: {url})"

        await invocation.reply(_success(notice))
        await self._reporter.activity_changed(invocation.member, described)

    # ─────────────────────────────────────────────────────────────────
    # Info
    # ─────────────────────────────────────────────────────────────────

    def _ping_text(self) -> str:
        latency = self._bot.latency
        latency_ms = round(latency * 1000) if math.isfinite(latency) else 0
        if latency_ms < 150:
            emoji = EmojiConstants.LATENCY_GOOD
        elif latency_ms < 300:
            emoji = EmojiConstants.LATENCY_WARN
        else:
            emoji = EmojiConstants.LATENCY_BAD
        return DiscordUIMessages.SUCCESS_PONG.format(emoji=emoji, latency_ms=latency_ms)

    def _uptime_embed(self) -> discord.Embed:
        process = psutil.Process()
        return embeds.uptime_embed(
            uptime=format_uptime(time.time() - process.create_time()),
            guilds=len(self._bot.guilds),
            sessions=len(self._sessions),
            memory=format_bytes(process.memory_info().rss),
            color=self._color,
        )
