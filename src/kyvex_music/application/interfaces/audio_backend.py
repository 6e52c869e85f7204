"""Port interface for the external audio-node client."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from kyvex_music.domain.music.entities import QueueItem
from kyvex_music.domain.music.value_objects import LoadType
from kyvex_music.domain.shared.types import ChannelIdField, DiscordSnowflake, VolumeInt


class ResolveResult(BaseModel):
    """What a query resolved to on the audio node."""

    model_config = ConfigDict(frozen=True, strict=True)

    load_type: LoadType
    items: tuple[QueueItem, ...] = ()
    playlist_name: str | None = None
    playlist_url: str | None = None
    playlist_thumbnail_url: str | None = None

    @property
    def is_playlist(self) -> bool:
        return self.load_type is LoadType.PLAYLIST

    @property
    def is_empty(self) -> bool:
        return not self.items or self.load_type in {LoadType.EMPTY, LoadType.ERROR}


class AudioBackend(ABC):
    """Interface for the per-guild audio player.

    The backend plays one item at a time; queue order, loop mode, and
    playback state live in the domain session. Failures surface as
    ``ExternalFailureError``.
    """

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, voice_channel_id: ChannelIdField) -> None:
        """Join (or move to) a voice channel and create the guild's player."""
        ...

    @abstractmethod
    async def resolve(self, query: str) -> ResolveResult:
        """Resolve a URL or search query into playable items."""
        ...

    @abstractmethod
    async def play(self, guild_id: DiscordSnowflake, item: QueueItem, *, volume: VolumeInt) -> None:
        """Start ``item`` immediately and unpaused, replacing whatever is playing."""
        ...

    @abstractmethod
    async def pause(self, guild_id: DiscordSnowflake, paused: bool) -> None:
        ...

    @abstractmethod
    async def destroy(self, guild_id: DiscordSnowflake) -> None:
        """Stop playback, leave voice, and drop the guild's player.

        Best-effort: failures are logged, never raised.
        """
        ...

    @abstractmethod
    async def set_volume(self, guild_id: DiscordSnowflake, volume: VolumeInt) -> None:
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    def position_ms(self, guild_id: DiscordSnowflake) -> int:
        """Playback position of the current item, 0 when unknown."""
        ...
