"""Command objects for every textual command and control button.

Each command is a frozen model tagged by ``kind``. The router dispatches on
the concrete type with one ``match`` statement, so adding a variant here
without handling it there shows up in type checking and in the router tests.
Numeric arguments stay raw strings; the session and queue validate them
before anything is mutated.
"""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    requires_voice: ClassVar[bool] = False


# ── Playback ────────────────────────────────────────────────────────


class PlayCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["play"] = "play"
    query: str = ""


class PauseCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["pause"] = "pause"


class ResumeCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["resume"] = "resume"


class TogglePauseCommand(_Command):
    """Button-only: pause when playing, resume when paused."""

    requires_voice: ClassVar[bool] = True
    kind: Literal["toggle_pause"] = "toggle_pause"


class SkipCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["skip"] = "skip"


class StopCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["stop"] = "stop"


class VolumeCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["volume"] = "volume"
    level: str = ""


class LoopCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["loop"] = "loop"


# ── Queue ───────────────────────────────────────────────────────────


class QueueCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["queue"] = "queue"
    page: str | None = None


class NowPlayingCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["nowplaying"] = "nowplaying"


class ShuffleCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["shuffle"] = "shuffle"


class RemoveCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["remove"] = "remove"
    position: str = ""


class ClearCommand(_Command):
    requires_voice: ClassVar[bool] = True
    kind: Literal["clear"] = "clear"


class StatusCommand(_Command):
    kind: Literal["status"] = "status"


# ── Administration and info ─────────────────────────────────────────


class PrefixCommand(_Command):
    kind: Literal["prefix"] = "prefix"
    new_prefix: str | None = None


class SetActivityCommand(_Command):
    kind: Literal["setactivity"] = "setactivity"
    activity_type: str = ""
    words: tuple[str, ...] = ()


class PingCommand(_Command):
    kind: Literal["ping"] = "ping"


class UptimeCommand(_Command):
    kind: Literal["uptime"] = "uptime"


class UpdatesCommand(_Command):
    kind: Literal["updates"] = "updates"


class HelpCommand(_Command):
    kind: Literal["help"] = "help"


BotCommand = Annotated[
    PlayCommand
    | PauseCommand
    | ResumeCommand
    | TogglePauseCommand
    | SkipCommand
    | StopCommand
    | VolumeCommand
    | LoopCommand
    | QueueCommand
    | NowPlayingCommand
    | ShuffleCommand
    | RemoveCommand
    | ClearCommand
    | StatusCommand
    | PrefixCommand
    | SetActivityCommand
    | PingCommand
    | UptimeCommand
    | UpdatesCommand
    | HelpCommand,
    Field(discriminator="kind"),
]


class CommandInfo(BaseModel):
    """Help-text metadata for one textual command."""

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    usage: str
    description: str


COMMANDS: tuple[CommandInfo, ...] = (
    CommandInfo(name="play", usage="play <query>", description="Play a song or playlist"),
    CommandInfo(name="pause", usage="pause", description="Pause the current track"),
    CommandInfo(name="resume", usage="resume", description="Resume the current track"),
    CommandInfo(name="skip", usage="skip", description="Skip the current track"),
    CommandInfo(name="stop", usage="stop", description="Stop playback and clear queue"),
    CommandInfo(name="queue", usage="queue [page]", description="Show the current queue"),
    CommandInfo(name="nowplaying", usage="nowplaying", description="Show current track info"),
    CommandInfo(name="volume", usage="volume <0-100>", description="Adjust player volume"),
    CommandInfo(name="shuffle", usage="shuffle", description="Shuffle the current queue"),
    CommandInfo(name="loop", usage="loop", description="Toggle queue loop mode"),
    CommandInfo(name="remove", usage="remove <position>", description="Remove a track from queue"),
    CommandInfo(name="clear", usage="clear", description="Clear the current queue"),
    CommandInfo(name="status", usage="status", description="Show player status"),
    CommandInfo(
        name="prefix", usage="prefix <new>", description="Change this server's prefix (Admin or owner)"
    ),
    CommandInfo(name="ping", usage="ping", description="Show gateway latency"),
    CommandInfo(name="uptime", usage="uptime", description="Show how long the bot has been running"),
    CommandInfo(
        name="setactivity",
        usage="setactivity <type> <name> [url]",
        description="Set the bot's activity (Owner only). URL needed for streaming.",
    ),
    CommandInfo(name="updates", usage="updates", description="Show the latest bot updates and changelog"),
    CommandInfo(name="help", usage="help", description="Show this help message"),
)
