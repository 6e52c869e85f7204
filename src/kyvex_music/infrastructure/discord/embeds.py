"""Embed builders for playback, queue, and info replies."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import discord

from kyvex_music.domain.music.value_objects import LoopMode
from kyvex_music.domain.shared.messages import DiscordUIMessages, EmojiConstants
from kyvex_music.utils.reply import format_duration_ms, truncate

if TYPE_CHECKING:
    from kyvex_music.application.commands.models import CommandInfo
    from kyvex_music.application.services.playback_service import EnqueueResult
    from kyvex_music.application.services.queue_service import QueuePage
    from kyvex_music.domain.music.entities import GuildSession, QueueItem
    from kyvex_music.domain.shared.changelog import ChangelogEntry

FIELD_VALUE_LIMIT = 1024


def item_duration(item: QueueItem) -> str:
    return format_duration_ms(item.duration_ms, live=item.is_live)


def format_requester(item: QueueItem) -> str:
    if item.requester_id:
        return f"<@{item.requester_id}>"
    if item.requester_name:
        return item.requester_name
    return "Unknown"


def _link(item: QueueItem, limit: int = 80) -> str:
    title = truncate(item.title, limit)
    return f"[{title}]({item.uri})" if item.uri else title


def _new_embed(color: int, *, title: str | None = None, description: str | None = None) -> discord.Embed:
    return discord.Embed(
        title=title, description=description, color=color, timestamp=discord.utils.utcnow()
    )


# ── Playback ────────────────────────────────────────────────────────


def now_playing_embed(item: QueueItem, *, color: int) -> discord.Embed:
    embed = _new_embed(
        color,
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description=f"**{_link(item, 200)}**",
    )
    if item.thumbnail_url:
        embed.set_thumbnail(url=item.thumbnail_url)

    requester = format_requester(item)
    embed.add_field(name="Artist", value=f"{EmojiConstants.USER} {truncate(item.author, 64)}", inline=True)
    embed.add_field(name="Duration", value=f"{EmojiConstants.TIMER} {item_duration(item)}", inline=True)
    embed.add_field(name="Requested By", value=f"{EmojiConstants.INFO} {requester}", inline=True)
    if item.requester_name:
        embed.set_footer(text=DiscordUIMessages.REQUESTED_BY.format(requester=item.requester_name))
    return embed


def added_to_queue_embed(item: QueueItem, position: int, *, color: int) -> discord.Embed:
    embed = _new_embed(
        color,
        description=DiscordUIMessages.ADDED_TO_QUEUE.format(
            title=truncate(item.title, 200), uri=item.uri or ""
        ),
    )
    if item.thumbnail_url:
        embed.set_thumbnail(url=item.thumbnail_url)

    position_text = DiscordUIMessages.POSITION_NOW if position == 0 else f"#{position}"
    embed.add_field(name="Artist", value=f"{EmojiConstants.USER} {truncate(item.author, 64)}", inline=True)
    embed.add_field(name="Duration", value=f"{EmojiConstants.TIMER} {item_duration(item)}", inline=True)
    embed.add_field(name="Position", value=f"{EmojiConstants.QUEUE} {position_text}", inline=True)
    if item.requester_name:
        embed.set_footer(text=DiscordUIMessages.REQUESTED_BY.format(requester=item.requester_name))
    return embed


def added_playlist_embed(result: EnqueueResult, *, color: int) -> discord.Embed:
    name = truncate(result.playlist_name or "Playlist", 200)
    description = f"**[{name}]({result.playlist_url})**" if result.playlist_url else f"**{name}**"
    embed = _new_embed(color, title=DiscordUIMessages.EMBED_ADDED_PLAYLIST, description=description)

    total_ms = sum(item.duration_ms for item in result.items if not item.is_live)
    streams = sum(1 for item in result.items if item.is_live)

    embed.add_field(
        name="Total Tracks", value=f"{EmojiConstants.QUEUE} {len(result.items)} tracks", inline=True
    )
    if total_ms > 0:
        embed.add_field(
            name="Estimated Duration",
            value=f"{EmojiConstants.TIMER} {format_duration_ms(total_ms)}",
            inline=True,
        )
    if streams > 0:
        embed.add_field(name="Streams Included", value=f"{EmojiConstants.INFO} {streams}", inline=True)

    thumbnail = result.playlist_thumbnail_url
    if thumbnail is None and result.items:
        thumbnail = result.items[0].thumbnail_url
    if thumbnail:
        embed.set_thumbnail(url=thumbnail)

    embed.set_footer(text=DiscordUIMessages.PLAYLIST_FOOTER)
    return embed


# ── Queue and status ────────────────────────────────────────────────


def queue_embed(page: QueuePage, *, color: int) -> discord.Embed:
    embed = _new_embed(color, title=DiscordUIMessages.EMBED_QUEUE)

    current = page.current
    if current is not None:
        embed.description = DiscordUIMessages.QUEUE_NOW_PLAYING_LINE.format(
            title=truncate(current.title, 80), uri=current.uri or "", duration=item_duration(current)
        )
        if current.thumbnail_url:
            embed.set_thumbnail(url=current.thumbnail_url)
    else:
        embed.description = DiscordUIMessages.QUEUE_EMPTY_DESCRIPTION

    if page.items:
        lines = [
            DiscordUIMessages.QUEUE_LINE.format(
                index=page.start_index + offset,
                title=truncate(item.title, 60),
                uri=item.uri or "",
                duration=item_duration(item),
            )
            for offset, item in enumerate(page.items)
        ]
        embed.add_field(name="\u200b", value="\n".join(lines)[:FIELD_VALUE_LIMIT], inline=False)
    elif current is None:
        embed.add_field(name="\u200b", value=DiscordUIMessages.QUEUE_NO_TRACKS, inline=False)

    footer = DiscordUIMessages.QUEUE_FOOTER.format(count=page.total_items)
    if page.total_duration_ms > 0:
        footer += DiscordUIMessages.QUEUE_FOOTER_DURATION.format(
            duration=format_duration_ms(page.total_duration_ms)
        )
    if page.stream_count > 0:
        footer += DiscordUIMessages.QUEUE_FOOTER_STREAMS.format(streams=page.stream_count)
    footer += DiscordUIMessages.QUEUE_FOOTER_PAGE.format(page=page.page, pages=page.total_pages)
    embed.set_footer(text=footer)
    return embed


def status_embed(session: GuildSession, *, position_ms: int, color: int) -> discord.Embed:
    embed = _new_embed(color, title=DiscordUIMessages.EMBED_PLAYER_STATUS)
    status = DiscordUIMessages.STATUS_PAUSED if session.is_paused else DiscordUIMessages.STATUS_PLAYING
    loop = (
        DiscordUIMessages.STATUS_LOOP_QUEUE
        if session.loop_mode is LoopMode.QUEUE
        else DiscordUIMessages.STATUS_LOOP_DISABLED
    )
    embed.add_field(name="Status", value=status, inline=True)
    embed.add_field(name="Volume", value=f"{EmojiConstants.SPEAKER} {session.volume}%", inline=True)
    embed.add_field(name="Loop Mode", value=loop, inline=True)
    embed.add_field(name="Voice Channel", value=f"<#{session.voice_channel_id}>", inline=True)

    current = session.current
    if current is None:
        embed.description = DiscordUIMessages.STATUS_NOTHING
        return embed

    embed.description = DiscordUIMessages.STATUS_CURRENT.format(
        title=truncate(current.title, 200),
        uri=current.uri or "",
        position=format_duration_ms(position_ms) if position_ms > 0 else "0:00",
        duration=item_duration(current),
    )
    if current.thumbnail_url:
        embed.set_thumbnail(url=current.thumbnail_url)
    return embed


# ── Info ────────────────────────────────────────────────────────────


def help_embed(commands: Iterable[CommandInfo], *, prefix: str, color: int) -> discord.Embed:
    lines = [
        DiscordUIMessages.HELP_LINE.format(prefix=prefix, usage=info.usage, description=info.description)
        for info in sorted(commands, key=lambda info: info.name)
    ]
    embed = _new_embed(color, title=DiscordUIMessages.EMBED_HELP, description="\n".join(lines))
    embed.set_footer(text=DiscordUIMessages.HELP_FOOTER.format(prefix=prefix))
    return embed


def updates_embed(entries: Iterable[ChangelogEntry], *, color: int) -> discord.Embed:
    embed = _new_embed(
        color,
        title=DiscordUIMessages.EMBED_UPDATES,
        description=DiscordUIMessages.UPDATES_DESCRIPTION,
    )
    for entry in entries:
        embed.add_field(
            name=DiscordUIMessages.UPDATES_FIELD.format(version=entry.version, date=entry.date),
            value="\n".join(f"• {change}" for change in entry.changes)[:FIELD_VALUE_LIMIT],
            inline=False,
        )
    embed.set_footer(text=DiscordUIMessages.UPDATES_FOOTER)
    return embed


def uptime_embed(
    *, uptime: str, guilds: int, sessions: int, memory: str, color: int
) -> discord.Embed:
    embed = _new_embed(color, title=DiscordUIMessages.EMBED_UPTIME, description=f"**{uptime}**")
    embed.add_field(name="Servers", value=str(guilds), inline=True)
    embed.add_field(name="Active Players", value=str(sessions), inline=True)
    embed.add_field(name="Memory", value=memory, inline=True)
    return embed
