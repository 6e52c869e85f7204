"""
Tests for QueueApplicationService.

Tests for:
- Paging the pending queue
- Removing by raw user position
- Clearing and shuffling
"""

import random

import pytest
from conftest import GUILD_ID, TEXT_CHANNEL_ID, VOICE_CHANNEL_ID, make_item

from kyvex_music.application.services.queue_service import QueueApplicationService
from kyvex_music.domain.shared.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    OutOfRangeError,
)
from kyvex_music.domain.shared.messages import ErrorMessages


@pytest.fixture
def playing_session(session_repository):
    session, _ = session_repository.get_or_create(
        GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID
    )
    session.enqueue(*(make_item(f"Track {n}", duration_ms=60_000) for n in range(1, 14)))
    return session


# =============================================================================
# get_page
# =============================================================================


class TestGetPage:
    def test_first_page(self, queue_service, playing_session):
        """Should return the first page of pending items with totals."""
        page = queue_service.get_page(GUILD_ID)

        assert page.current.title == "Track 1"
        assert [item.title for item in page.items][:2] == ["Track 2", "Track 3"]
        assert len(page.items) == 10
        assert page.start_index == 1
        assert page.total_pages == 2
        assert page.total_items == 12
        assert page.total_duration_ms == 12 * 60_000
        assert page.stream_count == 0

    def test_second_page(self, queue_service, playing_session):
        """Should continue numbering on later pages."""
        page = queue_service.get_page(GUILD_ID, 2)

        assert page.start_index == 11
        assert [item.title for item in page.items] == ["Track 12", "Track 13"]

    @pytest.mark.parametrize("page", [0, 3, -1])
    def test_out_of_range_page(self, queue_service, playing_session, page):
        """Should reject pages outside 1..total_pages."""
        with pytest.raises(InvalidArgumentError, match="between 1 and 2"):
            queue_service.get_page(GUILD_ID, page)

    def test_only_current_item(self, queue_service, session_repository):
        """Should show a single empty page while something plays."""
        session, _ = session_repository.get_or_create(
            GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID
        )
        session.enqueue(make_item("Solo"))

        page = queue_service.get_page(GUILD_ID)

        assert page.items == ()
        assert page.total_pages == 1

    def test_empty_queue(self, queue_service, session_repository):
        """Should report an empty queue."""
        session_repository.get_or_create(
            GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID
        )
        with pytest.raises(NotFoundError, match="Queue is empty"):
            queue_service.get_page(GUILD_ID)

    def test_without_session(self, queue_service):
        """Should report nothing playing."""
        with pytest.raises(NotFoundError) as exc_info:
            queue_service.get_page(GUILD_ID)
        assert exc_info.value.message == ErrorMessages.NOTHING_PLAYING


# =============================================================================
# remove / clear / shuffle
# =============================================================================


class TestEdits:
    def test_remove_by_string_position(self, queue_service, playing_session):
        """Should parse the position and remove that item."""
        removed = queue_service.remove(GUILD_ID, "2")

        assert removed.title == "Track 3"
        assert playing_session.queue.length == 11

    @pytest.mark.parametrize("position", ["abc", "1.5", "", "0", "13", None])
    def test_remove_rejects_bad_positions(self, queue_service, playing_session, position):
        """Should raise OutOfRange and leave the queue as it was."""
        snapshot = list(playing_session.queue.pending)

        with pytest.raises(OutOfRangeError, match="between 1 and 12"):
            queue_service.remove(GUILD_ID, position)
        assert playing_session.queue.pending == snapshot

    def test_clear(self, queue_service, playing_session):
        """Should drop pending items and keep the current one."""
        assert queue_service.clear(GUILD_ID) == 12
        assert playing_session.queue.pending == []
        assert playing_session.current.title == "Track 1"

    def test_clear_already_empty(self, queue_service, session_repository):
        """Should report an already empty queue."""
        session, _ = session_repository.get_or_create(
            GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID
        )
        session.enqueue(make_item("Solo"))

        with pytest.raises(NotFoundError, match="already empty"):
            queue_service.clear(GUILD_ID)

    def test_shuffle(self, session_repository, playing_session):
        """Should shuffle with the injected RNG."""
        service = QueueApplicationService(
            session_repository=session_repository, rng=random.Random(1)
        )
        before = [item.title for item in playing_session.queue.pending]

        assert service.shuffle(GUILD_ID) is True
        assert sorted(item.title for item in playing_session.queue.pending) == sorted(before)

    def test_shuffle_single_item(self, queue_service, session_repository):
        """Should report that there was nothing to shuffle."""
        session, _ = session_repository.get_or_create(
            GUILD_ID, voice_channel_id=VOICE_CHANNEL_ID, text_channel_id=TEXT_CHANNEL_ID
        )
        session.enqueue(make_item("A"), make_item("B"))

        assert queue_service.shuffle(GUILD_ID) is False
