"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from kyvex_music.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        title: NonEmptyStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

VolumeInt = Annotated[int, Field(ge=0, le=100)]
"""Player volume percentage: 0 … 100."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track length in milliseconds; 0 marks a live or indeterminate stream."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

CommandPrefixStr = Annotated[str, Field(min_length=1, max_length=5, pattern=r"^\S+$")]
"""Bot command prefix: 1-5 characters, no whitespace."""

HexColorStr = Annotated[str, Field(pattern=r"^#[0-9a-fA-F]{6}$")]
"""Embed color as #RRGGBB."""


# ── Pydantic-compatible ID aliases ──────────────────────────────────

GuildIdField = DiscordSnowflake
"""Alias: guild ID used as a plain Pydantic field."""

UserIdField = DiscordSnowflake
"""Alias: user ID used as a plain Pydantic field."""

ChannelIdField = DiscordSnowflake
"""Alias: channel ID used as a plain Pydantic field."""
