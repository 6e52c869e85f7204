"""Turn a prefixed chat message into a command object."""

from __future__ import annotations

from kyvex_music.application.commands.models import (
    BotCommand,
    ClearCommand,
    HelpCommand,
    LoopCommand,
    NowPlayingCommand,
    PauseCommand,
    PingCommand,
    PlayCommand,
    PrefixCommand,
    QueueCommand,
    RemoveCommand,
    ResumeCommand,
    SetActivityCommand,
    ShuffleCommand,
    SkipCommand,
    StatusCommand,
    StopCommand,
    UpdatesCommand,
    UptimeCommand,
    VolumeCommand,
)

_NO_ARGUMENT_COMMANDS: dict[str, type[BotCommand]] = {
    "pause": PauseCommand,
    "resume": ResumeCommand,
    "skip": SkipCommand,
    "stop": StopCommand,
    "nowplaying": NowPlayingCommand,
    "shuffle": ShuffleCommand,
    "loop": LoopCommand,
    "clear": ClearCommand,
    "status": StatusCommand,
    "ping": PingCommand,
    "uptime": UptimeCommand,
    "updates": UpdatesCommand,
    "help": HelpCommand,
}


def strip_prefix(content: str, prefix: str) -> str | None:
    """Return the text after ``prefix``, or None when the message does not start with it."""
    if not prefix or not content.startswith(prefix):
        return None
    body = content[len(prefix) :].strip()
    return body or None


def parse_command(content: str, prefix: str) -> BotCommand | None:
    """Parse ``content`` into a command, or None if it is not a known command for ``prefix``.

    Command names are case-insensitive; arguments are whitespace-separated and
    passed through unvalidated.
    """
    body = strip_prefix(content, prefix)
    if body is None:
        return None

    parts = body.split(maxsplit=1)
    name = parts[0].lower()
    rest = parts[1].strip() if len(parts) > 1 else ""
    args = rest.split()

    if name in _NO_ARGUMENT_COMMANDS:
        return _NO_ARGUMENT_COMMANDS[name]()

    match name:
        case "play":
            return PlayCommand(query=rest)
        case "queue":
            return QueueCommand(page=args[0] if args else None)
        case "volume":
            return VolumeCommand(level=args[0] if args else "")
        case "remove":
            return RemoveCommand(position=args[0] if args else "")
        case "prefix":
            return PrefixCommand(new_prefix=args[0] if args else None)
        case "setactivity":
            return SetActivityCommand(
                activity_type=args[0].lower() if args else "",
                words=tuple(args[1:]),
            )
        case _:
            return None
