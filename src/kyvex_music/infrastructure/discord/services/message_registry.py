"""Discord-side bookkeeping for the now-playing message and "added to queue" notices."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import discord

from kyvex_music.application.interfaces.message_registry import MessageRegistry
from kyvex_music.domain.music.entities import MessageRef
from kyvex_music.domain.shared.messages import DiscordUIMessages, LogTemplates
from kyvex_music.infrastructure.discord import embeds

if TYPE_CHECKING:
    from kyvex_music.application.services.playback_service import EnqueueResult
    from kyvex_music.domain.music.entities import GuildSession, QueueItem

logger = logging.getLogger(__name__)

ViewFactory = Callable[["GuildSession"], discord.ui.View]


class DiscordMessageRegistry(MessageRegistry):
    """Posts and deletes a guild's transient messages.

    References live on the session itself. Each method detaches the
    references it is about to delete before its first ``await``, so a second
    event for the same guild never sees (or deletes) them twice.
    """

    def __init__(
        self,
        bot: discord.Client,
        *,
        embed_color: int,
        view_factory: ViewFactory | None = None,
    ) -> None:
        self._bot = bot
        self._embed_color = embed_color
        self._view_factory = view_factory
        self._views: dict[int, discord.ui.View] = {}

    # ─────────────────────────────────────────────────────────────────
    # MessageRegistry
    # ─────────────────────────────────────────────────────────────────

    async def on_track_start(self, session: GuildSession, item: QueueItem) -> None:
        prior = session.messages.take_now_playing()
        if prior is not None:
            await self.delete(prior)

        channel = await self._get_channel(session.text_channel_id)
        if channel is None:
            logger.warning(LogTemplates.MESSAGE_CHANNEL_MISSING, session.text_channel_id, session.guild_id)
            return

        embed = embeds.now_playing_embed(item, color=self._embed_color)
        view = self._view_factory(session) if self._view_factory is not None else None
        try:
            if view is not None:
                message = await channel.send(embed=embed, view=view)
            else:
                message = await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, session.text_channel_id, e)
            return

        ref = MessageRef(channel_id=message.channel.id, message_id=message.id)
        if view is not None:
            self._views[message.id] = view
            set_message = getattr(view, "set_message", None)
            if set_message is not None:
                set_message(message)

        if not session.state.is_active:
            # The session ended while the message was being sent.
            await self.delete(ref)
            return

        displaced = session.messages.replace_now_playing(ref)
        if displaced is not None:
            await self.delete(displaced)

    async def on_enqueue(
        self, session: GuildSession, result: EnqueueResult, *, channel_id: int
    ) -> None:
        channel = await self._get_channel(channel_id)
        if channel is None:
            logger.warning(LogTemplates.MESSAGE_CHANNEL_MISSING, channel_id, session.guild_id)
            return

        if result.is_playlist:
            embed = embeds.added_playlist_embed(result, color=self._embed_color)
        else:
            embed = embeds.added_to_queue_embed(
                result.items[0], result.position, color=self._embed_color
            )

        try:
            message = await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, e)
            return

        ref = MessageRef(channel_id=message.channel.id, message_id=message.id)
        if session.state.is_active:
            session.messages.add_queue_notification(ref)
        else:
            await self.delete(ref)

    async def flush(self, session: GuildSession) -> None:
        refs = session.messages.drain()
        for ref in refs:
            await self.delete(ref)
        if refs:
            logger.debug(LogTemplates.MESSAGES_FLUSHED, len(refs), session.guild_id)

    async def announce(self, session: GuildSession, content: str) -> None:
        channel = await self._get_channel(session.text_channel_id)
        if channel is None:
            logger.warning(LogTemplates.MESSAGE_CHANNEL_MISSING, session.text_channel_id, session.guild_id)
            return
        try:
            await channel.send(DiscordUIMessages.NOTICE_INFO.format(message=content))
        except discord.HTTPException as e:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, session.text_channel_id, e)

    # ─────────────────────────────────────────────────────────────────
    # Deletion
    # ─────────────────────────────────────────────────────────────────

    async def delete(self, ref: MessageRef) -> bool:
        """Delete a tracked message; True when it is gone afterwards.

        A message that no longer exists counts as deleted. Any other failure
        is logged and reported as False.
        """
        view = self._views.pop(ref.message_id, None)
        if view is not None:
            view.stop()

        channel = await self._get_channel(ref.channel_id)
        get_partial = getattr(channel, "get_partial_message", None)
        if get_partial is None:
            logger.debug(LogTemplates.MESSAGE_ALREADY_DELETED, ref.message_id, ref.channel_id)
            return True

        try:
            await get_partial(ref.message_id).delete()
        except discord.NotFound:
            logger.debug(LogTemplates.MESSAGE_ALREADY_DELETED, ref.message_id, ref.channel_id)
            return True
        except discord.HTTPException as e:
            logger.warning(LogTemplates.MESSAGE_DELETE_FAILED, ref.message_id, ref.channel_id, e)
            return False
        return True

    async def _get_channel(self, channel_id: int) -> Any:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException:
                return None
        return channel
