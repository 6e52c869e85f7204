"""Formatting helpers for chat replies and embeds."""

from __future__ import annotations

from functools import cache

LIVE = "LIVE"


@cache
def format_duration_ms(milliseconds: int | None, *, live: bool = False) -> str:
    """Render a track length as ``m:ss`` or ``h:mm:ss``; live or unknown lengths read ``LIVE``."""
    if live or not milliseconds or milliseconds < 0:
        return LIVE

    total_seconds = milliseconds // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_uptime(seconds: float) -> str:
    """Render a process uptime as ``1d 2h 3m 4s``, dropping leading zero units."""
    total = max(int(seconds), 0)
    days, total = divmod(total, 86400)
    hours, total = divmod(total, 3600)
    minutes, secs = divmod(total, 60)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if days or hours:
        parts.append(f"{hours}h")
    if days or hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


def format_bytes(num_bytes: int) -> str:
    mebibytes = num_bytes / (1024 * 1024)
    return f"{mebibytes:.1f} MB"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
