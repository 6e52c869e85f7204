"""JSON-file implementation of the guild prefix repository."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from kyvex_music.domain.guild.repository import PrefixRepository
from kyvex_music.domain.shared.exceptions import ExternalFailureError, InvalidArgumentError
from kyvex_music.domain.shared.messages import ErrorMessages, LogTemplates
from kyvex_music.domain.shared.validators import MAX_PREFIX_LENGTH, is_valid_prefix

logger = logging.getLogger(__name__)


class JsonPrefixStore(PrefixRepository):
    """Prefixes held in memory and mirrored to ``{"<guild id>": "<prefix>"}`` on disk."""

    def __init__(self, path: str | Path, default_prefix: str) -> None:
        self._path = Path(path)
        self._default = default_prefix
        self._prefixes: dict[int, str] = {}

    @property
    def default(self) -> str:
        return self._default

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[int, str]:
        if not self._path.exists():
            self._prefixes = {}
            try:
                self._write({})
                logger.info(LogTemplates.PREFIXES_FILE_CREATED, self._path)
            except OSError as e:
                logger.error(LogTemplates.PREFIX_SAVE_FAILED, self._path, e)
            return dict(self._prefixes)

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(LogTemplates.PREFIXES_LOAD_FAILED, self._path, e)
            self._prefixes = {}
            return {}

        prefixes: dict[int, str] = {}
        if isinstance(raw, dict):
            for key, value in raw.items():
                try:
                    guild_id = int(key)
                except (TypeError, ValueError):
                    continue
                if isinstance(value, str) and is_valid_prefix(value):
                    prefixes[guild_id] = value

        self._prefixes = prefixes
        logger.info(LogTemplates.PREFIXES_LOADED, len(prefixes), self._path)
        return dict(prefixes)

    def get(self, guild_id: int | None) -> str:
        if guild_id is None:
            return self._default
        return self._prefixes.get(guild_id, self._default)

    def set(self, guild_id: int, prefix: str) -> None:
        if not is_valid_prefix(prefix):
            raise InvalidArgumentError(
                ErrorMessages.INVALID_PREFIX.format(max_length=MAX_PREFIX_LENGTH), field="prefix"
            )

        updated = {**self._prefixes, guild_id: prefix}
        try:
            self._write(updated)
        except OSError as e:
            logger.error(LogTemplates.PREFIX_SAVE_FAILED, self._path, e)
            raise ExternalFailureError("prefix store", cause=e) from e

        self._prefixes = updated
        logger.info(LogTemplates.PREFIX_SAVED, guild_id, prefix)

    def _write(self, prefixes: dict[int, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({str(k): v for k, v in prefixes.items()}, indent=4)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self._path)
