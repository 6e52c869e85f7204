"""Voice channel and permission guards shared by the router and views."""

from kyvex_music.infrastructure.discord.guards.voice_guards import (
    check_control_interaction,
    is_bot_owner,
    is_guild_admin,
    send_ephemeral,
    voice_channel_id,
)

__all__ = [
    "check_control_interaction",
    "is_bot_owner",
    "is_guild_admin",
    "send_ephemeral",
    "voice_channel_id",
]
