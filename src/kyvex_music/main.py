#!/usr/bin/env python3
"""Kyvex Music launcher: configure logging, report the setup, then run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kyvex_music.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from kyvex_music.config.settings import Settings

logger = logging.getLogger(__name__)

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_DEFAULT_LAVALINK_PASSWORD = "youshallnotpass"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _load_logging_config(path: Path) -> dict[str, Any] | None:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return None


def configure_logging(level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply ``logging_config.json``, or a plain console format when it is unusable.

    The root level always follows ``level`` so LOG_LEVEL wins over the file.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    config = _load_logging_config(config_path)

    applied = False
    if config is not None:
        try:
            logging.config.dictConfig(config)
            applied = True
        except (ValueError, TypeError, AttributeError, ImportError):
            pass

    if not applied:
        logging.basicConfig(level=numeric_level, format=_FALLBACK_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        logger.warning("Could not load %s, falling back to basic config", config_path)

    logging.getLogger().setLevel(numeric_level)


def startup_warnings(settings: Settings) -> list[str]:
    """Configuration that still lets the bot run but is probably a mistake."""
    warnings: list[str] = []
    if not settings.discord.owner_ids:
        warnings.append(LogTemplates.STARTUP_NO_OWNERS)
    if settings.discord.log_channel_id is None:
        warnings.append(LogTemplates.STARTUP_NO_LOG_CHANNEL)
    if (
        settings.environment == "production"
        and settings.lavalink.password.get_secret_value() == _DEFAULT_LAVALINK_PASSWORD
    ):
        warnings.append(LogTemplates.STARTUP_DEFAULT_LAVALINK_PASSWORD)
    return warnings


def report_startup(settings: Settings) -> None:
    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    logger.info(
        LogTemplates.STARTUP_LAVALINK_NODE,
        settings.lavalink.identifier,
        settings.lavalink.uri,
        settings.lavalink.search_source,
    )
    logger.info(LogTemplates.STARTUP_PREFIXES, settings.discord.command_prefix, settings.storage.prefixes_path)
    for warning in startup_warnings(settings):
        logger.warning(warning)


def run_bot(settings: Settings, token: str) -> int:
    """Build the bot from ``settings`` and block until it stops; returns the exit code."""
    from kyvex_music.config.container import create_container
    from kyvex_music.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)
    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return 0


def main() -> int:
    from kyvex_music.config.settings import get_settings

    settings = get_settings()
    configure_logging(settings.log_level)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    report_startup(settings)
    return run_bot(settings, token)


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
