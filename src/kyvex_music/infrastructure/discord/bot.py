"""Main Discord bot class wiring the DI container, the Lavalink node, and the command router."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
import wavelink
from discord.ext import commands

from kyvex_music.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

EXTENSIONS = ("kyvex_music.infrastructure.discord.cogs.event_cog",)


class MusicBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=self._resolve_prefix,
            intents=intents,
            help_command=None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        container.set_bot(self)

    @staticmethod
    def _resolve_prefix(bot: commands.Bot, message: discord.Message) -> str:
        guild_id = message.guild.id if message.guild is not None else None
        return bot.container.prefix_store.get(guild_id)  # type: ignore[attr-defined]

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        self.container.initialize()
        await self._connect_nodes()
        await self._load_cogs()

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _connect_nodes(self) -> None:
        lavalink = self.settings.lavalink
        node = wavelink.Node(
            uri=lavalink.uri,
            password=lavalink.password.get_secret_value(),
            identifier=lavalink.identifier,
        )
        logger.info(LogTemplates.NODE_CONNECTING, lavalink.identifier, lavalink.uri)
        try:
            await wavelink.Pool.connect(
                nodes=[node], client=self, cache_capacity=lavalink.cache_capacity
            )
        except (wavelink.WavelinkException, OSError) as e:
            # Playback commands report the missing node; the bot itself stays up.
            logger.error(LogTemplates.NODE_CONNECT_FAILED, lavalink.identifier, e)

    async def _load_cogs(self) -> None:
        loaded = 0
        failed = 0

        for extension in EXTENSIONS:
            try:
                await self.load_extension(extension)
                logger.info(LogTemplates.BOT_COG_LOADED, extension)
                loaded += 1
            except commands.ExtensionError as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, extension, e)
                failed += 1

        logger.info(LogTemplates.BOT_COGS_LOADED_SUMMARY, loaded, failed)

    async def on_message(self, message: discord.Message) -> None:
        await self.container.command_router.handle_message(message)

    async def on_ready(self) -> None:
        logger.info(
            LogTemplates.BOT_READY,
            self.user,  # type: ignore
            self.user.id,  # type: ignore
        )
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

        discord_settings = self.settings.discord
        activity = discord.Streaming(
            name=discord_settings.activity_name, url=discord_settings.activity_url
        )
        await self.change_presence(activity=activity)
        logger.info(LogTemplates.BOT_PRESENCE_SET, "Streaming", discord_settings.activity_name)

        await self.container.log_reporter.bot_started(self.user, len(self.guilds))  # type: ignore[arg-type]

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        try:
            await self.container.shutdown()
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        async def runner():
            async with self:
                loop = asyncio.get_running_loop()

                async def _graceful_close() -> None:
                    try:
                        await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
                    except TimeoutError:
                        logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, lambda: asyncio.create_task(_graceful_close()))
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> MusicBot:
    return MusicBot(container=container, settings=settings)
