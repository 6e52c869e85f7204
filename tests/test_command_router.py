"""
Tests for CommandRouter.

Tests for:
- Prefix resolution per guild, including a prefix change by an administrator
- Voice preconditions and permission checks
- Error notices for domain, external, and unexpected failures
- Info and administration commands
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from conftest import GUILD_ID, TEXT_CHANNEL_ID, USER_ID, make_guild, make_member, make_message

from kyvex_music.application.commands.models import SetActivityCommand, SkipCommand
from kyvex_music.config.settings import DiscordSettings
from kyvex_music.domain.shared.exceptions import InvalidArgumentError, PreconditionFailedError
from kyvex_music.domain.shared.messages import DiscordUIMessages, EmojiConstants, ErrorMessages
from kyvex_music.infrastructure.discord.services.command_router import CommandRouter, Invocation
from kyvex_music.infrastructure.discord.services.log_channel import LogChannelReporter
from kyvex_music.infrastructure.persistence.prefix_store import JsonPrefixStore

OWNER_ID = 555555555555555555


def _error(message: str) -> str:
    return DiscordUIMessages.NOTICE_ERROR.format(message=message)


def _success(message: str) -> str:
    return DiscordUIMessages.NOTICE_SUCCESS.format(message=message)


def _sent_content(message) -> str:
    return message.channel.send.call_args.kwargs["content"]


def _sent_embed(message) -> discord.Embed:
    return message.channel.send.call_args.kwargs["embed"]


@pytest.fixture
def prefix_store(tmp_path):
    store = JsonPrefixStore(tmp_path / "prefixes.json", default_prefix=".")
    store.load()
    return store


@pytest.fixture
def log_reporter():
    return AsyncMock(spec=LogChannelReporter)


@pytest.fixture
def router(mock_bot, playback_service, queue_service, prefix_store, session_repository, log_reporter):
    return CommandRouter(
        mock_bot,
        playback_service=playback_service,
        queue_service=queue_service,
        prefix_store=prefix_store,
        session_repository=session_repository,
        log_reporter=log_reporter,
        settings=DiscordSettings(owner_ids=[OWNER_ID]),
    )


async def _run(router, content: str, **kwargs):
    message = make_message(content, **kwargs)
    handled = await router.handle_message(message)
    return message, handled


# =============================================================================
# Prefix resolution
# =============================================================================


class TestPrefixResolution:
    @pytest.mark.asyncio
    async def test_default_prefix(self, router):
        """Should resolve guilds without a custom prefix to the default."""
        assert router.prefix_for(GUILD_ID) == "."
        message, handled = await _run(router, ".ping")

        assert handled
        assert "Pong" in _sent_content(message)

    @pytest.mark.asyncio
    async def test_admin_changes_prefix(self, router):
        """Should switch the guild to the new prefix and stop matching the old one."""
        admin = make_member(administrator=True)
        message, _ = await _run(router, ".prefix !", member=admin)
        assert _sent_content(message) == _success(
            DiscordUIMessages.SUCCESS_PREFIX_SET.format(prefix="!")
        )

        _, old_handled = await _run(router, ".ping")
        new_message, new_handled = await _run(router, "!ping")

        assert old_handled is False
        assert new_handled is True
        assert "Pong" in _sent_content(new_message)

    @pytest.mark.asyncio
    async def test_prefix_is_per_guild(self, router, prefix_store):
        """Should leave other guilds on the default prefix."""
        prefix_store.set(GUILD_ID, "!")
        other_guild = make_guild(GUILD_ID + 1)

        _, handled = await _run(router, ".ping", guild=other_guild)

        assert handled

    @pytest.mark.asyncio
    async def test_non_admin_cannot_change_prefix(self, router, prefix_store):
        """Should deny prefix changes to regular members."""
        message, _ = await _run(router, ".prefix !")

        assert _sent_content(message) == _error(ErrorMessages.PERMISSION_DENIED)
        assert prefix_store.get(GUILD_ID) == "."

    @pytest.mark.asyncio
    async def test_owner_can_change_prefix(self, router, prefix_store):
        """Should let a configured owner change the prefix."""
        await _run(router, ".prefix ?", member=make_member(user_id=OWNER_ID))
        assert prefix_store.get(GUILD_ID) == "?"

    @pytest.mark.asyncio
    async def test_invalid_prefix(self, router, prefix_store):
        """Should reject prefixes longer than five characters."""
        admin = make_member(administrator=True)
        message, _ = await _run(router, ".prefix toolong", member=admin)

        assert _sent_content(message).startswith("❌ | Prefix must be")
        assert prefix_store.get(GUILD_ID) == "."

    @pytest.mark.asyncio
    async def test_show_current_prefix(self, router):
        """Should show the current prefix when no argument is given."""
        admin = make_member(administrator=True)
        message, _ = await _run(router, ".prefix", member=admin)

        assert "Current prefix is `.`" in _sent_content(message)


# =============================================================================
# Filtering and reporting
# =============================================================================


class TestMessageFiltering:
    @pytest.mark.asyncio
    async def test_ignores_bots(self, router):
        """Should ignore messages from bots."""
        bot_member = make_member()
        bot_member.bot = True
        _, handled = await _run(router, ".ping", member=bot_member)
        assert handled is False

    @pytest.mark.asyncio
    async def test_ignores_direct_messages(self, router):
        """Should ignore messages outside guilds."""
        message = make_message(".ping")
        message.guild = None
        assert await router.handle_message(message) is False

    @pytest.mark.asyncio
    async def test_ignores_unknown_commands(self, router, log_reporter):
        """Should stay silent for unknown commands."""
        message, handled = await _run(router, ".dance")

        assert handled is False
        message.channel.send.assert_not_awaited()
        log_reporter.command_used.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reports_command_usage(self, router, log_reporter):
        """Should report recognized commands to the log channel."""
        message, _ = await _run(router, ".ping")
        log_reporter.command_used.assert_awaited_once_with(".", "ping", message)


# =============================================================================
# Preconditions and errors
# =============================================================================


class TestPreconditions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [".play song", ".pause", ".skip", ".volume 50", ".queue", ".clear"])
    async def test_music_commands_need_voice(self, router, content, audio_backend):
        """Should refuse music commands from members outside voice."""
        message, _ = await _run(router, content, member=make_member(voice_channel_id=None))

        assert _sent_content(message) == _error(ErrorMessages.NOT_IN_VOICE)
        assert audio_backend.calls == []

    @pytest.mark.asyncio
    async def test_status_does_not_need_voice(self, router):
        """Should let status run outside voice."""
        message, _ = await _run(router, ".status", member=make_member(voice_channel_id=None))
        assert _sent_content(message) == _error(ErrorMessages.NO_ACTIVE_PLAYER)

    @pytest.mark.asyncio
    async def test_domain_error_becomes_notice(self, router):
        """Should answer domain errors with an error notice."""
        message, _ = await _run(router, ".pause")
        assert _sent_content(message) == _error(ErrorMessages.NOTHING_PLAYING)

    @pytest.mark.asyncio
    async def test_external_failure_is_reported(self, router, audio_backend, log_reporter):
        """Should notify the user and the log channel of backend failures."""
        audio_backend.fail_on.add("connect")

        message, _ = await _run(router, ".play song")

        assert _sent_content(message).startswith("❌ | lavalink failed")
        log_reporter.error.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, router, queue_service, log_reporter, monkeypatch):
        """Should answer unexpected exceptions with a generic notice."""
        monkeypatch.setattr(queue_service, "get_page", MagicMock(side_effect=RuntimeError("boom")))

        message, _ = await _run(router, ".queue")

        assert _sent_content(message) == _error(ErrorMessages.COMMAND_FAILED)
        log_reporter.error.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reply_failure_does_not_raise(self, router):
        """Should swallow a failed error notice."""
        response = MagicMock(status=403, reason="Forbidden")
        message = make_message(".pause")
        message.channel.send.side_effect = discord.Forbidden(response, "nope")

        assert await router.handle_message(message) is True

    def test_invocation_from_direct_message_rejected(self):
        """Should refuse to build an invocation outside a server."""
        message = make_message(".pause")
        message.guild = None

        with pytest.raises(PreconditionFailedError) as exc_info:
            Invocation.from_message(message)
        assert exc_info.value.message == ErrorMessages.SERVER_ONLY

    @pytest.mark.parametrize("guild, channel_id", [(None, TEXT_CHANNEL_ID), (make_guild(), None)])
    def test_invocation_from_interaction_needs_guild_channel(self, guild, channel_id):
        """Should refuse button presses without a guild or channel."""
        interaction = MagicMock(guild=guild, channel_id=channel_id)

        with pytest.raises(PreconditionFailedError):
            Invocation.from_interaction(interaction)


# =============================================================================
# Playback commands
# =============================================================================


class TestPlaybackCommands:
    @pytest.mark.asyncio
    async def test_play_then_controls(self, router, playback_service, audio_backend):
        """Should drive the session through play, pause, resume, volume, and stop."""
        await _run(router, ".play some song")
        assert audio_backend.played_titles() == ["A"]

        message, _ = await _run(router, ".pause")
        assert _sent_content(message) == _success(DiscordUIMessages.SUCCESS_PAUSED)

        message, _ = await _run(router, ".resume")
        assert _sent_content(message) == _success(DiscordUIMessages.SUCCESS_RESUMED)

        message, _ = await _run(router, ".volume 25")
        assert _sent_content(message) == _success("Set volume to 25%")

        message, _ = await _run(router, ".stop")
        assert _sent_content(message) == _success(DiscordUIMessages.SUCCESS_STOPPED)
        assert playback_service.get_session(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_invalid_volume(self, router, playback_service):
        """Should reject malformed volume and keep the old one."""
        await _run(router, ".play some song")

        message, _ = await _run(router, ".volume loud")

        assert _sent_content(message) == _error(ErrorMessages.INVALID_VOLUME)
        assert playback_service.get_session(GUILD_ID).volume == 100

    @pytest.mark.asyncio
    async def test_loop_toggle(self, router):
        """Should announce loop on then off."""
        await _run(router, ".play some song")

        first, _ = await _run(router, ".loop")
        second, _ = await _run(router, ".loop")

        assert _sent_content(first) == _success(DiscordUIMessages.SUCCESS_LOOP_ENABLED)
        assert _sent_content(second) == _success(DiscordUIMessages.SUCCESS_LOOP_DISABLED)

    @pytest.mark.asyncio
    async def test_shuffle_needs_two_pending(self, router):
        """Should refuse to shuffle fewer than two pending items."""
        await _run(router, ".play some song")

        message, _ = await _run(router, ".shuffle")

        assert _sent_content(message) == _error(ErrorMessages.NOT_ENOUGH_TO_SHUFFLE)

    @pytest.mark.asyncio
    async def test_queue_and_nowplaying_embeds(self, router):
        """Should reply with queue and now-playing embeds."""
        await _run(router, ".play some song")

        queue_message, _ = await _run(router, ".queue")
        np_message, _ = await _run(router, ".nowplaying")

        assert _sent_embed(queue_message).title == DiscordUIMessages.EMBED_QUEUE
        assert _sent_embed(np_message).title == DiscordUIMessages.EMBED_NOW_PLAYING

    @pytest.mark.asyncio
    async def test_queue_bad_page(self, router):
        """Should reject a non-numeric page."""
        await _run(router, ".play some song")

        message, _ = await _run(router, ".queue abc")

        assert _sent_content(message) == _error(ErrorMessages.INVALID_PAGE.format(pages=1))

    @pytest.mark.asyncio
    async def test_remove_bad_position(self, router):
        """Should reject a position outside the pending items."""
        await _run(router, ".play some song")

        message, _ = await _run(router, ".remove 1")

        assert _sent_content(message) == _error(ErrorMessages.INVALID_POSITION.format(length=0))

    @pytest.mark.asyncio
    async def test_status_embed(self, router):
        """Should show the player status embed."""
        await _run(router, ".play some song")

        message, _ = await _run(router, ".status")

        assert _sent_embed(message).title == DiscordUIMessages.EMBED_PLAYER_STATUS


# =============================================================================
# Info commands
# =============================================================================


class TestInfoCommands:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "latency, indicator",
        [(0.05, "LATENCY_GOOD"), (0.2, "LATENCY_WARN"), (0.5, "LATENCY_BAD"), (float("inf"), "LATENCY_GOOD")],
    )
    async def test_ping(self, router, mock_bot, latency, indicator):
        """Should pick the indicator from the latency."""
        mock_bot.latency = latency
        message, _ = await _run(router, ".ping")

        assert _sent_content(message).startswith(getattr(EmojiConstants, indicator))

    @pytest.mark.asyncio
    async def test_help_uses_guild_prefix(self, router, prefix_store):
        """Should list commands with the guild's own prefix."""
        prefix_store.set(GUILD_ID, "!")

        message, _ = await _run(router, "!help")

        embed = _sent_embed(message)
        assert "`!play <query>`" in embed.description
        assert embed.footer.text == DiscordUIMessages.HELP_FOOTER.format(prefix="!")

    @pytest.mark.asyncio
    async def test_uptime(self, router):
        """Should reply with the uptime embed."""
        message, _ = await _run(router, ".uptime")

        embed = _sent_embed(message)
        assert embed.title == DiscordUIMessages.EMBED_UPTIME
        assert [field.name for field in embed.fields] == ["Servers", "Active Players", "Memory"]

    @pytest.mark.asyncio
    async def test_updates(self, router):
        """Should list changelog entries."""
        message, _ = await _run(router, ".updates")
        assert _sent_embed(message).title == DiscordUIMessages.EMBED_UPDATES


# =============================================================================
# setactivity
# =============================================================================


class TestSetActivity:
    @pytest.mark.asyncio
    async def test_owner_only(self, router, mock_bot):
        """Should deny non-owners."""
        message, _ = await _run(router, ".setactivity playing chess")

        assert _sent_content(message) == _error(ErrorMessages.PERMISSION_DENIED)
        mock_bot.change_presence.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sets_listening(self, router, mock_bot, log_reporter):
        """Should set the presence and report the change."""
        owner = make_member(user_id=OWNER_ID)
        message, _ = await _run(router, ".setactivity listening lo-fi beats", member=owner)

        activity = mock_bot.change_presence.call_args.kwargs["activity"]
        assert activity.type is discord.ActivityType.listening
        assert activity.name == "lo-fi beats"
        assert _sent_content(message) == _success(
            DiscordUIMessages.SUCCESS_ACTIVITY_SET.format(activity_type="Listening", name="lo-fi beats")
        )
        log_reporter.activity_changed.assert_awaited_once()

    @pytest.mark.parametrize(
        "url",
        ["https://twitch.tv/someone", "https://www.youtube.com/watch?v=abc", "https://youtu.be/abc"],
    )
    def test_streaming_urls_accepted(self, router, url):
        """Should accept Twitch and YouTube links."""
        command = SetActivityCommand(activity_type="streaming", words=("My", "Show", url))

        activity, name, parsed_url = router.build_activity(command, ".")

        assert isinstance(activity, discord.Streaming)
        assert name == "My Show"
        assert parsed_url == url

    @pytest.mark.parametrize(
        "words, expected",
        [
            ((), ErrorMessages.ACTIVITY_STREAMING_URL_REQUIRED.format(prefix=".")),
            (("My", "Show"), ErrorMessages.ACTIVITY_STREAMING_URL_REQUIRED.format(prefix=".")),
            (("https://twitch.tv/x",), ErrorMessages.ACTIVITY_STREAMING_USAGE.format(prefix=".")),
            (("Show", "https://example.com/live"), ErrorMessages.ACTIVITY_STREAMING_URL_INVALID),
        ],
    )
    def test_streaming_errors(self, router, words, expected):
        """Should explain what is wrong with a streaming request."""
        command = SetActivityCommand(activity_type="streaming", words=words)

        with pytest.raises(InvalidArgumentError) as exc_info:
            router.build_activity(command, ".")
        assert exc_info.value.message == expected

    def test_unknown_type(self, router):
        """Should reject unknown activity types."""
        command = SetActivityCommand(activity_type="dancing", words=("wildly",))
        with pytest.raises(InvalidArgumentError, match="Invalid activity type"):
            router.build_activity(command, ".")

    def test_missing_name(self, router):
        """Should show usage when the name is missing."""
        command = SetActivityCommand(activity_type="playing")
        with pytest.raises(InvalidArgumentError, match="Usage"):
            router.build_activity(command, ".")


# =============================================================================
# Button invocations
# =============================================================================


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatch_with_custom_reply(self, router, playback_service):
        """Should answer through the invocation's reply callable."""
        await _run(router, ".play some song")
        reply = AsyncMock()
        invocation = Invocation(
            guild=make_guild(),
            member=make_member(),
            channel_id=TEXT_CHANNEL_ID,
            reply=reply,
        )

        await router.dispatch(invocation, SkipCommand())

        reply.assert_awaited_once_with(_success(DiscordUIMessages.SUCCESS_SKIPPED))
        assert playback_service.get_session(GUILD_ID) is None

    def test_owner_check_uses_application_owner(self, router, mock_bot):
        """Should treat the application owner as an owner."""
        mock_bot.application = MagicMock()
        mock_bot.application.owner.id = USER_ID
        assert router.is_owner(USER_ID)
        assert router.is_owner(OWNER_ID)
        assert not router.is_owner(USER_ID + 1)
