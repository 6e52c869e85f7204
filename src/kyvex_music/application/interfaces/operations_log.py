"""Port interface for the operational log sink (the bot's log channel)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import QueueItem


class OperationsLog(ABC):
    """Records notable events for operators. Implementations never raise."""

    @abstractmethod
    async def player_event(self, guild_id: int, event: str, item: QueueItem | None = None) -> None:
        ...

    @abstractmethod
    async def error(self, source: str, error: BaseException) -> None:
        ...
