"""Repository interface for per-guild command prefixes."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PrefixRepository(ABC):
    """Mapping of guild ID to a custom command prefix.

    Loaded once at startup; reads never touch the backing store and every
    write is persisted before ``set`` returns.
    """

    @abstractmethod
    def load(self) -> dict[int, str]:
        """Load all stored prefixes into memory and return them."""
        ...

    @abstractmethod
    def get(self, guild_id: int | None) -> str:
        """Return the guild's prefix, or the default when none is stored."""
        ...

    @abstractmethod
    def set(self, guild_id: int, prefix: str) -> None:
        """Store and persist a guild's prefix.

        Raises:
            InvalidArgumentError: If the prefix is empty, too long, or contains whitespace.
        """
        ...

    @property
    @abstractmethod
    def default(self) -> str:
        ...
