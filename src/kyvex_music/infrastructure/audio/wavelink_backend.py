"""Lavalink audio backend implementing AudioBackend on top of wavelink."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord
import wavelink

from kyvex_music.application.interfaces.audio_backend import AudioBackend, ResolveResult
from kyvex_music.domain.music.entities import QueueItem
from kyvex_music.domain.music.value_objects import LoadType
from kyvex_music.domain.shared.exceptions import ExternalFailureError
from kyvex_music.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from kyvex_music.config.settings import LavalinkSettings

logger = logging.getLogger(__name__)

SOURCE = "lavalink"
CONNECT_TIMEOUT: float = 10.0

# Failures that mean the node or the voice gateway did not do what we asked.
_BACKEND_ERRORS: tuple[type[BaseException], ...] = (
    wavelink.WavelinkException,
    discord.ClientException,
    discord.HTTPException,
    TimeoutError,
)


def playable_to_item(playable: wavelink.Playable) -> QueueItem:
    """Copy the fields the session needs out of a resolved wavelink track."""
    return QueueItem(
        title=playable.title or "Unknown",
        track_id=playable.encoded,
        uri=playable.uri,
        author=playable.author or "Unknown",
        duration_ms=0 if playable.is_stream else max(int(playable.length), 0),
        is_stream=bool(playable.is_stream),
        thumbnail_url=playable.artwork,
        source=playable,
    )


class WavelinkAudioBackend(AudioBackend):
    def __init__(self, bot: discord.Client, settings: LavalinkSettings) -> None:
        self._bot = bot
        self._search_source = settings.search_source

    def _get_player(self, guild_id: int) -> wavelink.Player | None:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            return None
        vc = guild.voice_client
        return vc if isinstance(vc, wavelink.Player) else None

    def _require_player(self, guild_id: int) -> wavelink.Player:
        player = self._get_player(guild_id)
        if player is None:
            raise ExternalFailureError(SOURCE, message=ErrorMessages.PLAYER_UNAVAILABLE)
        return player

    # ─────────────────────────────────────────────────────────────────
    # Connection
    # ─────────────────────────────────────────────────────────────────

    async def connect(self, guild_id: int, voice_channel_id: int) -> None:
        guild = self._bot.get_guild(guild_id)
        channel = guild.get_channel(voice_channel_id) if guild is not None else None
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise ExternalFailureError("voice", message=ErrorMessages.VOICE_CONNECT_FAILED)

        try:
            player = self._get_player(guild_id)
            if player is None:
                player = await channel.connect(
                    cls=wavelink.Player, self_deaf=True, timeout=CONNECT_TIMEOUT
                )
            elif player.channel is None or player.channel.id != channel.id:
                await player.move_to(channel, self_deaf=True)
        except _BACKEND_ERRORS as e:
            raise ExternalFailureError(
                "voice", cause=e, message=ErrorMessages.VOICE_CONNECT_FAILED
            ) from e

        # Queue advancement is driven by the session, never by wavelink itself.
        player.autoplay = wavelink.AutoPlayMode.disabled

    def is_connected(self, guild_id: int) -> bool:
        player = self._get_player(guild_id)
        return player is not None and player.connected

    # ─────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────

    async def resolve(self, query: str) -> ResolveResult:
        try:
            found = await wavelink.Playable.search(query, source=self._search_source)
        except wavelink.LavalinkLoadException as e:
            logger.warning("Lavalink failed to load %r: %s", query, e)
            return ResolveResult(load_type=LoadType.ERROR)
        except _BACKEND_ERRORS as e:
            raise ExternalFailureError(SOURCE, cause=e, message=ErrorMessages.PLAY_FAILED) from e

        if isinstance(found, wavelink.Playlist):
            items = tuple(playable_to_item(track) for track in found.tracks)
            thumbnail = getattr(found, "artwork", None)
            if thumbnail is None and items:
                thumbnail = items[0].thumbnail_url
            return ResolveResult(
                load_type=LoadType.PLAYLIST if items else LoadType.EMPTY,
                items=items,
                playlist_name=found.name,
                playlist_url=getattr(found, "url", None),
                playlist_thumbnail_url=thumbnail,
            )

        if not found:
            return ResolveResult(load_type=LoadType.EMPTY)

        is_url = query.startswith(("http://", "https://"))
        return ResolveResult(
            load_type=LoadType.TRACK if is_url else LoadType.SEARCH,
            items=tuple(playable_to_item(track) for track in found),
        )

    # ─────────────────────────────────────────────────────────────────
    # Playback
    # ─────────────────────────────────────────────────────────────────

    async def play(self, guild_id: int, item: QueueItem, *, volume: int) -> None:
        player = self._require_player(guild_id)
        if not isinstance(item.source, wavelink.Playable):
            raise ExternalFailureError(SOURCE, message=ErrorMessages.PLAY_FAILED)
        try:
            await player.play(item.source, volume=volume, replace=True, paused=False)
        except _BACKEND_ERRORS as e:
            raise ExternalFailureError(SOURCE, cause=e, message=ErrorMessages.PLAY_FAILED) from e

    async def pause(self, guild_id: int, paused: bool) -> None:
        player = self._require_player(guild_id)
        try:
            await player.pause(paused)
        except _BACKEND_ERRORS as e:
            raise ExternalFailureError(SOURCE, cause=e, message=ErrorMessages.PLAYER_UNAVAILABLE) from e

    async def set_volume(self, guild_id: int, volume: int) -> None:
        player = self._require_player(guild_id)
        try:
            await player.set_volume(volume)
        except _BACKEND_ERRORS as e:
            raise ExternalFailureError(SOURCE, cause=e, message=ErrorMessages.PLAYER_UNAVAILABLE) from e

    async def destroy(self, guild_id: int) -> None:
        player = self._get_player(guild_id)
        if player is None:
            return
        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await player.disconnect()
        except _BACKEND_ERRORS as e:
            logger.warning("Failed destroying player in guild %s: %s", guild_id, e)

    def position_ms(self, guild_id: int) -> int:
        player = self._get_player(guild_id)
        if player is None or player.current is None:
            return 0
        return max(int(player.position), 0)
