from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from kyvex_music.application.interfaces.audio_backend import AudioBackend, ResolveResult
from kyvex_music.application.interfaces.message_registry import MessageRegistry
from kyvex_music.application.interfaces.operations_log import OperationsLog
from kyvex_music.domain.music.entities import GuildSession, QueueItem
from kyvex_music.domain.music.value_objects import LoadType
from kyvex_music.domain.shared.exceptions import ExternalFailureError

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222
TEXT_CHANNEL_ID = 333333333333333333
USER_ID = 444444444444444444


# ============================================================================
# Domain Fixtures
# ============================================================================


def make_item(title: str = "Test Track", **overrides) -> QueueItem:
    fields = {
        "title": title,
        "track_id": f"enc-{title}",
        "uri": f"https://example.com/{title.replace(' ', '-')}",
        "author": "Test Artist",
        "duration_ms": 180_000,
    }
    fields.update(overrides)
    return QueueItem(**fields)


@pytest.fixture
def item_factory():
    """Build queue items with sensible defaults."""
    return make_item


@pytest.fixture
def session() -> GuildSession:
    return GuildSession(
        guild_id=GUILD_ID,
        voice_channel_id=VOICE_CHANNEL_ID,
        text_channel_id=TEXT_CHANNEL_ID,
    )


# ============================================================================
# Collaborator Fakes
# ============================================================================


class FakeAudioBackend(AudioBackend):
    """Records every call; individual operations can be made to fail."""

    def __init__(self) -> None:
        self.connected: set[int] = set()
        self.calls: list[tuple] = []
        self.resolve_result = ResolveResult(load_type=LoadType.SEARCH, items=(make_item("A"),))
        self.fail_on: set[str] = set()
        self.position = 0

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise ExternalFailureError("lavalink", cause=RuntimeError(f"{operation} broke"))

    async def connect(self, guild_id, voice_channel_id):
        self._maybe_fail("connect")
        self.calls.append(("connect", guild_id, voice_channel_id))
        self.connected.add(guild_id)

    async def resolve(self, query):
        self._maybe_fail("resolve")
        self.calls.append(("resolve", query))
        return self.resolve_result

    async def play(self, guild_id, item, *, volume):
        self._maybe_fail("play")
        self.calls.append(("play", guild_id, item.title, volume))

    async def pause(self, guild_id, paused):
        self._maybe_fail("pause")
        self.calls.append(("pause", guild_id, paused))

    async def destroy(self, guild_id):
        self.calls.append(("destroy", guild_id))
        self.connected.discard(guild_id)

    async def set_volume(self, guild_id, volume):
        self._maybe_fail("volume")
        self.calls.append(("volume", guild_id, volume))

    def is_connected(self, guild_id):
        return guild_id in self.connected

    def position_ms(self, guild_id):
        return self.position

    def played_titles(self) -> list[str]:
        return [call[2] for call in self.calls if call[0] == "play"]


@pytest.fixture
def audio_backend() -> FakeAudioBackend:
    return FakeAudioBackend()


@pytest.fixture
def message_registry() -> AsyncMock:
    return AsyncMock(spec=MessageRegistry)


@pytest.fixture
def operations_log() -> AsyncMock:
    return AsyncMock(spec=OperationsLog)


@pytest.fixture
def session_repository():
    from kyvex_music.infrastructure.persistence.session_store import InMemorySessionRepository

    return InMemorySessionRepository()


@pytest.fixture
def playback_service(session_repository, audio_backend, message_registry, operations_log):
    from kyvex_music.application.services.playback_service import PlaybackApplicationService

    return PlaybackApplicationService(
        session_repository=session_repository,
        audio_backend=audio_backend,
        message_registry=message_registry,
        operations_log=operations_log,
        default_volume=100,
    )


@pytest.fixture
def queue_service(session_repository):
    from kyvex_music.application.services.queue_service import QueueApplicationService

    return QueueApplicationService(session_repository=session_repository, page_size=10)


# ============================================================================
# Discord Mocks
# ============================================================================


def make_member(
    *,
    user_id: int = USER_ID,
    voice_channel_id: int | None = VOICE_CHANNEL_ID,
    administrator: bool = False,
) -> MagicMock:
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.bot = False
    member.display_name = "Tester"
    member.mention = f"<@{user_id}>"
    if voice_channel_id is None:
        member.voice = None
    else:
        member.voice = MagicMock()
        member.voice.channel = MagicMock()
        member.voice.channel.id = voice_channel_id
    member.guild_permissions = MagicMock()
    member.guild_permissions.administrator = administrator
    return member


def make_guild(guild_id: int = GUILD_ID) -> MagicMock:
    guild = MagicMock(spec=discord.Guild)
    guild.id = guild_id
    guild.name = "Test Guild"
    return guild


def make_message(content: str, *, member: MagicMock | None = None, guild: MagicMock | None = None):
    message = MagicMock(spec=discord.Message)
    message.content = content
    message.author = member or make_member()
    message.guild = guild if guild is not None else make_guild()
    message.channel = MagicMock()
    message.channel.id = TEXT_CHANNEL_ID
    message.channel.send = AsyncMock()
    return message


@pytest.fixture
def mock_bot() -> MagicMock:
    bot = MagicMock()
    bot.application = None
    bot.latency = 0.042
    bot.guilds = [MagicMock(), MagicMock()]
    bot.change_presence = AsyncMock()
    return bot
