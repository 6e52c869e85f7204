"""Shared validators for Discord-specific data and command arguments."""

from __future__ import annotations

import math

from kyvex_music.domain.shared.messages import ErrorMessages

MAX_PREFIX_LENGTH = 5


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Raises:
        ValueError: If the snowflake ID is not a positive 64-bit integer.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def parse_strict_int(value: object) -> int | None:
    """Interpret ``value`` as an integer without silently truncating.

    Accepts ints and integral strings (``"42"``, ``" 7 "``). Returns None for
    anything else, including bools, NaN, infinities, fractional floats, and
    strings like ``"12abc"`` or ``"1.5"``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.startswith(("+", "-")):
            sign, digits = text[0], text[1:]
        else:
            sign, digits = "", text
        if not digits or not digits.isascii() or not digits.isdigit():
            return None
        return int(sign + digits)
    return None


def is_valid_prefix(value: str) -> bool:
    """A prefix is 1..5 characters without whitespace."""
    return 0 < len(value) <= MAX_PREFIX_LENGTH and not any(ch.isspace() for ch in value)
