"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kyvex_music.domain.music.value_objects import LoopMode, PlaybackState
from kyvex_music.domain.shared.exceptions import (
    AlreadyInStateError,
    AlreadyPausedError,
    AlreadyPlayingError,
    InvalidVolumeError,
    NotFoundError,
    NothingToSkipError,
    OutOfRangeError,
)
from kyvex_music.domain.shared.messages import ErrorMessages
from kyvex_music.domain.shared.types import (
    ChannelIdField,
    DiscordSnowflake,
    DurationMs,
    GuildIdField,
    NonEmptyStr,
    VolumeInt,
)
from kyvex_music.domain.shared.validators import parse_strict_int


class QueueItem(BaseModel):
    """Immutable value object representing one playable unit.

    ``source`` is an opaque handle owned by the audio backend (for Lavalink,
    the resolved playable). The domain never inspects it.
    """

    model_config = ConfigDict(frozen=True, strict=True, arbitrary_types_allowed=True)

    title: NonEmptyStr
    track_id: str | None = None
    uri: str | None = None
    author: str = "Unknown"
    duration_ms: DurationMs = 0
    is_stream: bool = False
    thumbnail_url: str | None = None

    # Request metadata (set when queued)
    requester_id: DiscordSnowflake | None = None
    requester_name: str | None = None

    source: Any = Field(default=None, exclude=True, repr=False)

    @property
    def is_live(self) -> bool:
        return self.is_stream or self.duration_ms == 0

    def with_requester(self, user_id: DiscordSnowflake, user_name: str | None = None) -> QueueItem:
        """Return a copy of this item annotated with who asked for it."""
        return self.model_copy(update={"requester_id": user_id, "requester_name": user_name})


class TrackQueue(BaseModel):
    """Ordered pending items plus the in-flight ``current`` item.

    Positions are 1-indexed at this interface and 0-indexed in ``pending``.
    """

    model_config = ConfigDict(strict=True)

    current: QueueItem | None = None
    pending: list[QueueItem] = Field(default_factory=list)
    loop_mode: LoopMode = LoopMode.NONE

    @property
    def length(self) -> int:
        return len(self.pending)

    @property
    def is_empty(self) -> bool:
        return self.current is None and not self.pending

    @property
    def has_next(self) -> bool:
        """Whether advancing would produce another item."""
        if self.pending:
            return True
        return self.loop_mode is LoopMode.QUEUE and self.current is not None

    @property
    def total_duration_ms(self) -> int:
        """Summed length of pending items, streams excluded."""
        return sum(item.duration_ms for item in self.pending if not item.is_live)

    @property
    def stream_count(self) -> int:
        return sum(1 for item in self.pending if item.is_live)

    def add(self, item: QueueItem) -> int:
        """Append an item and return its 1-indexed position."""
        self.pending.append(item)
        return len(self.pending)

    def remove_at(self, position: int) -> QueueItem:
        """Remove and return the item at a 1-indexed position.

        Raises:
            OutOfRangeError: If ``position`` is outside ``1..length``. Nothing is removed.
        """
        length = len(self.pending)
        if position < 1 or position > length:
            raise OutOfRangeError(
                position,
                length,
                message=ErrorMessages.INVALID_POSITION.format(length=length),
            )
        return self.pending.pop(position - 1)

    def clear(self) -> int:
        """Empty ``pending`` (``current`` stays) and return how many were removed."""
        count = len(self.pending)
        self.pending.clear()
        return count

    def shuffle(self, rng: random.Random | None = None) -> bool:
        """Shuffle ``pending`` in place. With fewer than two items this is a no-op."""
        if len(self.pending) < 2:
            return False
        (rng or random).shuffle(self.pending)
        return True

    def set_loop(self, mode: LoopMode) -> None:
        self.loop_mode = mode

    def advance(self) -> QueueItem | None:
        """Move to the next item, re-appending the finished one when looping the queue."""
        if self.loop_mode is LoopMode.QUEUE and self.current is not None:
            self.pending.append(self.current)

        self.current = self.pending.pop(0) if self.pending else None
        return self.current

    def reset(self) -> None:
        self.current = None
        self.pending.clear()


class MessageRef(BaseModel):
    """Address of a chat message the bot posted."""

    model_config = ConfigDict(frozen=True, strict=True)

    channel_id: ChannelIdField
    message_id: DiscordSnowflake


class TransientMessageSet(BaseModel):
    """Messages whose lifetime follows the session, not the chat history.

    Every mutator here is synchronous, so callers can detach references before
    awaiting the deletes that follow.
    """

    now_playing: MessageRef | None = None
    queue_notifications: list[MessageRef] = Field(default_factory=list)

    @property
    def live_count(self) -> int:
        return len(self.queue_notifications) + (1 if self.now_playing is not None else 0)

    def take_now_playing(self) -> MessageRef | None:
        """Detach and return the now-playing reference."""
        ref, self.now_playing = self.now_playing, None
        return ref

    def replace_now_playing(self, ref: MessageRef) -> MessageRef | None:
        """Store ``ref`` as the now-playing message and return whatever it displaced."""
        prior, self.now_playing = self.now_playing, ref
        return prior

    def add_queue_notification(self, ref: MessageRef) -> None:
        if ref not in self.queue_notifications:
            self.queue_notifications.append(ref)

    def drain(self) -> list[MessageRef]:
        """Detach every reference (now-playing first) and leave both collections empty."""
        refs: list[MessageRef] = []
        if self.now_playing is not None:
            refs.append(self.now_playing)
        refs.extend(self.queue_notifications)
        self.now_playing = None
        self.queue_notifications = []
        return refs


class GuildSession(BaseModel):
    """Aggregate root holding playback state, queue, and transient UI refs for one guild.

    Invariant: ``state == PLAYING`` implies ``queue.current`` is set.
    """

    model_config = ConfigDict(strict=True)

    guild_id: GuildIdField
    voice_channel_id: ChannelIdField
    text_channel_id: ChannelIdField
    state: PlaybackState = PlaybackState.STOPPED
    volume: VolumeInt = 100
    queue: TrackQueue = Field(default_factory=TrackQueue)
    messages: TransientMessageSet = Field(default_factory=TransientMessageSet)

    @property
    def current(self) -> QueueItem | None:
        return self.queue.current

    @property
    def loop_mode(self) -> LoopMode:
        return self.queue.loop_mode

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.state is PlaybackState.PAUSED

    def _require_active(self) -> None:
        if not self.state.is_active or self.queue.current is None:
            raise NotFoundError("GuildSession", self.guild_id, ErrorMessages.NOTHING_PLAYING)

    def transition_to(self, new_state: PlaybackState) -> None:
        if not self.state.can_transition_to(new_state):
            raise AlreadyInStateError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def enqueue(self, *items: QueueItem) -> int:
        """Append items to the queue, starting playback if the session is idle.

        Returns the 1-indexed pending position of the first item, or 0 when that
        item became ``current`` (the caller should start it on the player).
        """
        if not items:
            return len(self.queue.pending)

        first_position = len(self.queue.pending) + 1
        self.queue.pending.extend(items)

        if self.queue.current is None and self.state is PlaybackState.STOPPED:
            self.queue.current = self.queue.pending.pop(0)
            self.transition_to(PlaybackState.PLAYING)
            return 0
        return first_position

    def pause(self) -> None:
        if self.state is PlaybackState.PAUSED:
            raise AlreadyPausedError(ErrorMessages.ALREADY_PAUSED)
        self._require_active()
        self.transition_to(PlaybackState.PAUSED)

    def resume(self) -> None:
        if self.state is PlaybackState.PLAYING:
            raise AlreadyPlayingError(ErrorMessages.ALREADY_PLAYING)
        self._require_active()
        self.transition_to(PlaybackState.PLAYING)

    def set_paused(self, paused: bool) -> None:
        if paused:
            self.pause()
        else:
            self.resume()

    def skip(self) -> QueueItem | None:
        """Advance past the current item on user request.

        Returns the next item (the session is then PLAYING), or None when the
        queue is exhausted and the session should be destroyed.

        Raises:
            NothingToSkipError: If there is neither a current nor a pending item.
        """
        if self.queue.is_empty:
            raise NothingToSkipError(ErrorMessages.NOTHING_TO_SKIP)
        return self.advance()

    def advance(self) -> QueueItem | None:
        """Advance after the current item ended on its own."""
        next_item = self.queue.advance()
        if next_item is None:
            self._stop()
        elif self.state is not PlaybackState.PLAYING:
            # Skipping while paused starts the next item unpaused.
            self.transition_to(PlaybackState.PLAYING)
        return next_item

    def set_volume(self, value: object) -> int:
        """Validate and store a volume.

        Raises:
            InvalidVolumeError: If ``value`` is not an integer in [0, 100].
        """
        volume = parse_strict_int(value)
        if volume is None or not 0 <= volume <= 100:
            raise InvalidVolumeError(value, ErrorMessages.INVALID_VOLUME)
        self.volume = volume
        return volume

    def toggle_loop(self) -> LoopMode:
        """Toggle between no loop and queue loop and return the new mode."""
        mode = self.queue.loop_mode.toggled()
        self.queue.set_loop(mode)
        return mode

    def end(self) -> None:
        """Mark the session stopped; callers delete it from the store afterwards."""
        self._stop()
        self.queue.reset()

    def _stop(self) -> None:
        if self.state.is_active:
            self.transition_to(PlaybackState.STOPPED)
