"""Release notes shown by the ``updates`` command, newest first."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from kyvex_music.domain.shared.types import NonEmptyStr


class ChangelogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    version: NonEmptyStr
    date: NonEmptyStr
    changes: tuple[NonEmptyStr, ...]


BOT_UPDATES: tuple[ChangelogEntry, ...] = (
    ChangelogEntry(
        version="1.0.1",
        date="June 24, 2025",
        changes=(
            "Added the **`updates`** command to show recent bot changes and a changelog.",
            "Improved error messages for various music commands for better user feedback.",
            "Minor performance optimizations for smoother queue management and playback.",
        ),
    ),
    ChangelogEntry(
        version="1.0.0",
        date="June 20, 2025",
        changes=(
            "Initial release of the music bot.",
            "Core music playback functionalities: `play`, `pause`, `resume`, `skip`, `stop`.",
            "Comprehensive queue management: `queue`, `shuffle`, `loop`, `remove`, `clear`.",
            "Volume adjustment (`volume`) and current track display (`nowplaying`).",
            "Seamless integration with YouTube and Spotify through Lavalink.",
        ),
    ),
)
