"""Reusable voice-channel and permission guards.

Free functions that take their dependencies explicitly, so the command router
and the control view apply the same rules.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import discord

from kyvex_music.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from kyvex_music.domain.music.entities import GuildSession

logger = logging.getLogger(__name__)


def _error_notice(message: str) -> str:
    return DiscordUIMessages.NOTICE_ERROR.format(message=message)


async def send_ephemeral(
    interaction: discord.Interaction,
    message: str | None = None,
    *,
    embed: discord.Embed | None = None,
) -> None:
    """Send an ephemeral reply, handling both fresh and already-responded interactions."""
    kwargs: dict = {"ephemeral": True}
    if message is not None:
        kwargs["content"] = message
    if embed is not None:
        kwargs["embed"] = embed

    if interaction.response.is_done():
        await interaction.followup.send(**kwargs)
    else:
        await interaction.response.send_message(**kwargs)


def voice_channel_id(member: discord.Member | discord.abc.User) -> int | None:
    """ID of the voice channel the member is connected to, if any."""
    voice = getattr(member, "voice", None)
    if voice is None or voice.channel is None:
        return None
    return voice.channel.id


def is_bot_owner(bot: discord.Client, user_id: int, owner_ids: Collection[int]) -> bool:
    """Check if the user is a configured bot owner or the application owner."""
    if user_id in owner_ids:
        return True
    app_info = bot.application
    return bool(app_info and app_info.owner and app_info.owner.id == user_id)


def is_guild_admin(member: discord.Member | discord.abc.User) -> bool:
    permissions = getattr(member, "guild_permissions", None)
    return bool(permissions and permissions.administrator)


async def check_control_interaction(
    interaction: discord.Interaction, session: GuildSession | None
) -> bool:
    """Decide whether a control-button press may act on ``session``.

    Users outside voice get an ephemeral notice. Presses from another text
    channel or another voice channel are acknowledged and dropped silently.
    """
    user = interaction.user
    if interaction.guild is None or not isinstance(user, discord.Member):
        await send_ephemeral(interaction, _error_notice(ErrorMessages.SERVER_ONLY))
        return False

    member_channel = voice_channel_id(user)
    if member_channel is None:
        await send_ephemeral(interaction, _error_notice(ErrorMessages.NOT_IN_VOICE))
        return False

    if session is None:
        await send_ephemeral(interaction, _error_notice(ErrorMessages.NOTHING_PLAYING))
        return False

    if interaction.channel_id != session.text_channel_id or member_channel != session.voice_channel_id:
        custom_id = (interaction.data or {}).get("custom_id")
        logger.debug(LogTemplates.CONTROL_IGNORED, custom_id, user.id, interaction.guild.id)
        if not interaction.response.is_done():
            await interaction.response.defer()
        return False

    return True
