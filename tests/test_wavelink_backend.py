"""Tests for the wavelink-backed audio backend with wavelink itself mocked."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest
import wavelink
from conftest import GUILD_ID, VOICE_CHANNEL_ID, make_item

from kyvex_music.config.settings import LavalinkSettings
from kyvex_music.domain.music.value_objects import LoadType
from kyvex_music.domain.shared.exceptions import ExternalFailureError
from kyvex_music.infrastructure.audio.wavelink_backend import WavelinkAudioBackend, playable_to_item


def _playable(title: str = "Song", *, length: int = 200_000, stream: bool = False) -> MagicMock:
    playable = MagicMock(spec=wavelink.Playable)
    playable.title = title
    playable.encoded = f"enc-{title}"
    playable.uri = f"https://example.com/{title}"
    playable.author = "Artist"
    playable.length = length
    playable.is_stream = stream
    playable.artwork = "https://img.example.com/a.jpg"
    return playable


@pytest.fixture
def player() -> MagicMock:
    player = MagicMock(spec=wavelink.Player)
    player.play = AsyncMock()
    player.pause = AsyncMock()
    player.set_volume = AsyncMock()
    player.disconnect = AsyncMock()
    player.connected = True
    player.current = None
    return player


@pytest.fixture
def guild(player) -> MagicMock:
    guild = MagicMock(spec=discord.Guild)
    guild.voice_client = player
    return guild


@pytest.fixture
def backend(guild) -> WavelinkAudioBackend:
    bot = MagicMock()
    bot.get_guild = MagicMock(return_value=guild)
    return WavelinkAudioBackend(bot, LavalinkSettings(search_source="ytsearch"))


# =============================================================================
# playable_to_item
# =============================================================================


class TestPlayableToItem:
    def test_copies_fields(self):
        """Should keep the encoded track as the item id and the playable as source."""
        playable = _playable("Song")

        item = playable_to_item(playable)

        assert item.title == "Song"
        assert item.track_id == "enc-Song"
        assert item.duration_ms == 200_000
        assert item.source is playable

    def test_streams_have_no_length(self):
        item = playable_to_item(_playable(length=999, stream=True))
        assert item.duration_ms == 0
        assert item.is_live is True


# =============================================================================
# resolve
# =============================================================================


class TestResolve:
    @pytest.mark.asyncio
    async def test_search_results(self, backend):
        with patch.object(wavelink.Playable, "search", AsyncMock(return_value=[_playable("A")])) as search:
            result = await backend.resolve("some song")

        search.assert_awaited_once_with("some song", source="ytsearch")
        assert result.load_type is LoadType.SEARCH
        assert [item.title for item in result.items] == ["A"]

    @pytest.mark.asyncio
    async def test_url_is_a_track(self, backend):
        with patch.object(wavelink.Playable, "search", AsyncMock(return_value=[_playable("A")])):
            result = await backend.resolve("https://youtu.be/abc")

        assert result.load_type is LoadType.TRACK

    @pytest.mark.asyncio
    async def test_playlist(self, backend):
        """Should map every playlist track and keep the playlist name."""
        playlist = MagicMock(spec=wavelink.Playlist)
        playlist.tracks = [_playable("A"), _playable("B")]
        playlist.name = "Mix"
        playlist.artwork = None
        playlist.url = None

        with patch.object(wavelink.Playable, "search", AsyncMock(return_value=playlist)):
            result = await backend.resolve("https://youtube.com/playlist?list=x")

        assert result.load_type is LoadType.PLAYLIST
        assert result.playlist_name == "Mix"
        assert [item.title for item in result.items] == ["A", "B"]
        assert result.playlist_thumbnail_url == "https://img.example.com/a.jpg"

    @pytest.mark.asyncio
    async def test_no_matches(self, backend):
        with patch.object(wavelink.Playable, "search", AsyncMock(return_value=[])):
            result = await backend.resolve("nothing")

        assert result.load_type is LoadType.EMPTY
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_load_failure_is_an_error_result(self, backend):
        """Should report a load error as a result, not an exception."""
        error = wavelink.LavalinkLoadException.__new__(wavelink.LavalinkLoadException)
        with patch.object(wavelink.Playable, "search", AsyncMock(side_effect=error)):
            result = await backend.resolve("blocked")

        assert result.load_type is LoadType.ERROR

    @pytest.mark.asyncio
    async def test_node_failure_raises(self, backend):
        with patch.object(
            wavelink.Playable, "search", AsyncMock(side_effect=wavelink.WavelinkException("no nodes"))
        ):
            with pytest.raises(ExternalFailureError):
                await backend.resolve("song")


# =============================================================================
# Playback
# =============================================================================


class TestPlayback:
    @pytest.mark.asyncio
    async def test_play_uses_source(self, backend, player):
        playable = _playable("A")
        item = make_item("A", source=playable)

        await backend.play(GUILD_ID, item, volume=70)

        player.play.assert_awaited_once_with(playable, volume=70, replace=True, paused=False)

    @pytest.mark.asyncio
    async def test_play_without_source_fails(self, backend):
        with pytest.raises(ExternalFailureError):
            await backend.play(GUILD_ID, make_item("A"), volume=70)

    @pytest.mark.asyncio
    async def test_play_failure_wrapped(self, backend, player):
        """Should wrap node errors as external failures."""
        player.play.side_effect = wavelink.WavelinkException("boom")

        with pytest.raises(ExternalFailureError) as exc_info:
            await backend.play(GUILD_ID, make_item("A", source=_playable("A")), volume=70)

        assert exc_info.value.source == "lavalink"

    @pytest.mark.asyncio
    async def test_no_player(self, backend, guild):
        guild.voice_client = None

        with pytest.raises(ExternalFailureError):
            await backend.pause(GUILD_ID, True)
        assert backend.is_connected(GUILD_ID) is False
        assert backend.position_ms(GUILD_ID) == 0

    @pytest.mark.asyncio
    async def test_controls_forward_to_player(self, backend, player):
        await backend.pause(GUILD_ID, True)
        await backend.set_volume(GUILD_ID, 30)

        player.pause.assert_awaited_once_with(True)
        player.set_volume.assert_awaited_once_with(30)

    @pytest.mark.asyncio
    async def test_destroy_swallows_failures(self, backend, player):
        """Should log and carry on when disconnecting fails."""
        player.disconnect.side_effect = discord.ClientException("gone")

        await backend.destroy(GUILD_ID)

        player.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_requires_voice_channel(self, backend, guild):
        guild.get_channel = MagicMock(return_value=None)

        with pytest.raises(ExternalFailureError) as exc_info:
            await backend.connect(GUILD_ID, VOICE_CHANNEL_ID)

        assert exc_info.value.source == "voice"
