"""
Guild Bounded Context

Per-guild configuration that outlives playback sessions.
"""

from kyvex_music.domain.guild.repository import PrefixRepository

__all__ = ["PrefixRepository"]
