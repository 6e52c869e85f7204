"""Base exception classes for domain-level errors.

Every user-triggered failure is one of these kinds; the command router turns
them into short notices in the invoking channel.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class PreconditionFailedError(DomainError):
    """Raised when the invoker is not where the command needs them (voice/text channel)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PRECONDITION_FAILED")


class PermissionDeniedError(DomainError):
    """Raised when the invoker lacks the identity or capability a command requires."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PERMISSION_DENIED")


class InvalidArgumentError(DomainError):
    """Raised when a command argument is missing or malformed."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "INVALID_ARGUMENT")
        self.field = field


class InvalidVolumeError(InvalidArgumentError):
    """Raised when a volume is not an integer in [0, 100]."""

    def __init__(self, value: object, message: str | None = None) -> None:
        msg = message or f"Invalid volume: {value!r}"
        super().__init__(msg, field="volume", code="INVALID_VOLUME")
        self.value = value


class OutOfRangeError(InvalidArgumentError):
    """Raised when a 1-indexed queue position falls outside the pending items."""

    def __init__(self, position: int, length: int, message: str | None = None) -> None:
        msg = message or f"Position {position} is outside 1..{length}"
        super().__init__(msg, field="position", code="OUT_OF_RANGE")
        self.position = position
        self.length = length


class NotFoundError(DomainError):
    """Raised when a guild has no active session or player."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class AlreadyInStateError(DomainError):
    """Raised when an operation would move the session into the state it is already in."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="ALREADY_IN_STATE")
        self.operation = operation
        self.current_state = current_state


class AlreadyPausedError(AlreadyInStateError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__("pause", "paused", message)


class AlreadyPlayingError(AlreadyInStateError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__("resume", "playing", message)


class NothingToSkipError(DomainError):
    """Raised when skip is requested with no current item and an empty queue."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Nothing to skip", code="NOTHING_TO_SKIP")


class ExternalFailureError(DomainError):
    """Wraps a failure raised by the audio node client or the chat platform."""

    def __init__(self, source: str, cause: BaseException | None = None, message: str | None = None) -> None:
        if message is None:
            message = f"{source} failed: {cause}" if cause is not None else f"{source} failed"
        super().__init__(message, code="EXTERNAL_FAILURE")
        self.source = source
        self.cause = cause
