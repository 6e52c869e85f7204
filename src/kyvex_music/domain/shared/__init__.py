"""
Shared Domain Kernel

Contains exceptions, message constants, and constrained types shared across
bounded contexts.
"""

from kyvex_music.domain.shared.exceptions import (
    AlreadyInStateError,
    AlreadyPausedError,
    AlreadyPlayingError,
    DomainError,
    ExternalFailureError,
    InvalidArgumentError,
    InvalidVolumeError,
    NotFoundError,
    NothingToSkipError,
    OutOfRangeError,
    PermissionDeniedError,
    PreconditionFailedError,
)

__all__ = [
    "AlreadyInStateError",
    "AlreadyPausedError",
    "AlreadyPlayingError",
    "DomainError",
    "ExternalFailureError",
    "InvalidArgumentError",
    "InvalidVolumeError",
    "NotFoundError",
    "NothingToSkipError",
    "OutOfRangeError",
    "PermissionDeniedError",
    "PreconditionFailedError",
]
