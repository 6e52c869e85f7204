"""
Application Commands

Tagged command objects for every textual command and control button, plus
the parser that builds them from chat messages.
"""

from kyvex_music.application.commands.models import COMMANDS, BotCommand, CommandInfo
from kyvex_music.application.commands.parser import parse_command, strip_prefix

__all__ = [
    "COMMANDS",
    "BotCommand",
    "CommandInfo",
    "parse_command",
    "strip_prefix",
]
