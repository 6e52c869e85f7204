"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - STOPPED -> PLAYING (first play or automatic advance)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> STOPPED (explicit stop or queue end)
    """

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.STOPPED: {PlaybackState.PLAYING},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.STOPPED},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.STOPPED},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


class LoopMode(Enum):
    """Loop mode settings for queue playback."""

    NONE = "none"
    QUEUE = "queue"  # Re-append finished items to the end of the queue

    def toggled(self) -> LoopMode:
        return LoopMode.QUEUE if self is LoopMode.NONE else LoopMode.NONE


class LoadType(Enum):
    """Outcome kinds reported by the audio node when resolving a query."""

    TRACK = "track"
    SEARCH = "search"
    PLAYLIST = "playlist"
    EMPTY = "empty"
    ERROR = "error"


class TrackEndReason(Enum):
    """Why the audio node reports that a track stopped."""

    FINISHED = "finished"
    LOAD_FAILED = "loadFailed"
    STOPPED = "stopped"
    REPLACED = "replaced"
    CLEANUP = "cleanup"

    @property
    def may_start_next(self) -> bool:
        """Only natural ends advance the queue; the rest come from our own skip/stop."""
        return self in {TrackEndReason.FINISHED, TrackEndReason.LOAD_FAILED}

    @classmethod
    def parse(cls, raw: str) -> TrackEndReason | None:
        for reason in cls:
            if reason.value.lower() == raw.lower():
                return reason
        return None


class SessionEndReason(Enum):
    """Reasons a session can be destroyed."""

    STOPPED = "stopped"
    QUEUE_ENDED = "queue_ended"
    SKIPPED_PAST_END = "skipped_past_end"
    VOICE_LEFT = "voice_left"
    SHUTDOWN = "shutdown"
