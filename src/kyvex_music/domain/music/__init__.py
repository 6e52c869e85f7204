"""
Music Bounded Context

Domain logic for the track queue, the per-guild player session, and the
transient messages tied to its lifecycle.
"""

from kyvex_music.domain.music.entities import (
    GuildSession,
    MessageRef,
    QueueItem,
    TrackQueue,
    TransientMessageSet,
)
from kyvex_music.domain.music.repository import SessionRepository
from kyvex_music.domain.music.value_objects import (
    LoadType,
    LoopMode,
    PlaybackState,
    SessionEndReason,
    TrackEndReason,
)

__all__ = [
    # Entities
    "GuildSession",
    "MessageRef",
    "QueueItem",
    "TrackQueue",
    "TransientMessageSet",
    # Value Objects
    "LoadType",
    "LoopMode",
    "PlaybackState",
    "SessionEndReason",
    "TrackEndReason",
    # Repository
    "SessionRepository",
]
