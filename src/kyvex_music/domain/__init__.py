# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, messages, and types
- music/: Queue, player session, and transient message bookkeeping
- guild/: Per-guild settings such as the command prefix
"""

from kyvex_music.domain.shared.exceptions import DomainError

__all__ = ["DomainError"]
