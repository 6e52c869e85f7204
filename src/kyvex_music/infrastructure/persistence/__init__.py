"""Persistence adapters: live session storage and the guild prefix file."""

from kyvex_music.infrastructure.persistence.prefix_store import JsonPrefixStore
from kyvex_music.infrastructure.persistence.session_store import InMemorySessionRepository

__all__ = ["InMemorySessionRepository", "JsonPrefixStore"]
