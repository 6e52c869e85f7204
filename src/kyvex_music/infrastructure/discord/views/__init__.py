"""Discord UI views and components."""

from __future__ import annotations

from kyvex_music.infrastructure.discord.views.base_view import BaseInteractiveView
from kyvex_music.infrastructure.discord.views.now_playing_view import NowPlayingControls

__all__ = [
    "BaseInteractiveView",
    "NowPlayingControls",
]
