"""Application Settings and Configuration

Pydantic-based settings loaded from environment variables and an optional
``.env`` file. Nested groups use ``__`` as the delimiter, for example
``DISCORD__TOKEN`` or ``LAVALINK__URI``. All groups are frozen after load.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, VolumeInt
from ..domain.shared.validators import validate_discord_snowflake

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default=".", validation_alias=AliasChoices("command_prefix", "prefix")
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    log_channel_id: int | None = Field(
        default=None, validation_alias=AliasChoices("log_channel_id", "log_channel")
    )
    embed_color: str = "#7289DA"
    activity_name: str = "Kyvex Music"
    activity_url: str = "https://www.twitch.tv/kyvexmusic"

    @field_validator("owner_ids", mode="before")
    @classmethod
    def validate_owner_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v

    @field_validator("log_channel_id")
    @classmethod
    def validate_log_channel(cls, v: int | None) -> int | None:
        if v is not None:
            validate_discord_snowflake(v)
        return v

    @field_validator("embed_color")
    @classmethod
    def validate_embed_color(cls, v: str) -> str:
        if _HEX_COLOR.fullmatch(v) is None:
            raise ValueError(ErrorMessages.INVALID_EMBED_COLOR)
        return v.upper()

    @property
    def embed_color_value(self) -> int:
        return int(self.embed_color[1:], 16)


class LavalinkSettings(BaseModel):
    """Connection to the Lavalink audio node."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    uri: str = Field(
        default="http://localhost:2333", validation_alias=AliasChoices("uri", "url", "host")
    )
    password: SecretStr = Field(default=SecretStr("youshallnotpass"))
    identifier: str = Field(
        default="Main Node", validation_alias=AliasChoices("identifier", "name")
    )
    search_source: str = Field(
        default="ytmsearch", validation_alias=AliasChoices("search_source", "default_search")
    )
    cache_capacity: int = Field(default=100, ge=0, le=10000)

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Lavalink URI must start with http:// or https://")
        return v.rstrip("/")


class AudioSettings(BaseModel):
    """Playback defaults."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: VolumeInt = 100
    queue_page_size: int = Field(default=10, ge=1, le=25)


class StorageSettings(BaseModel):
    """On-disk state."""

    model_config = SettingsConfigDict(frozen=True)

    prefixes_path: str = "data/prefixes.json"


class Settings(BaseSettings):
    """Application settings container.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, DISCORD__LOG_CHANNEL_ID, ...
    - LAVALINK__URI, LAVALINK__PASSWORD, LAVALINK__SEARCH_SOURCE, ...
    - AUDIO__DEFAULT_VOLUME, AUDIO__QUEUE_PAGE_SIZE
    - STORAGE__PREFIXES_PATH
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    lavalink: LavalinkSettings = Field(default_factory=LavalinkSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings (.env file, then environment, then defaults)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
