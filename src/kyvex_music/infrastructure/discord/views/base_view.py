"""Shared plumbing for views attached to bot messages."""

from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """Remembers the message it is attached to and greys its buttons out on timeout."""

    def __init__(self, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._message: discord.Message | None = None

    @property
    def message(self) -> discord.Message | None:
        return self._message

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def _disable_buttons(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True

    async def on_timeout(self) -> None:
        self._disable_buttons()
        if self._message is None:
            return
        try:
            await self._message.edit(view=self)
        except discord.HTTPException as e:
            logger.debug("Could not disable buttons on message %s: %s", self._message.id, e)
