"""Discord cogs - event listeners."""

from kyvex_music.infrastructure.discord.cogs.event_cog import EventCog

__all__ = [
    "EventCog",
]
