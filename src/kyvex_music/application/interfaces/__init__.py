"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from kyvex_music.application.interfaces.audio_backend import AudioBackend, ResolveResult
from kyvex_music.application.interfaces.message_registry import MessageRegistry
from kyvex_music.application.interfaces.operations_log import OperationsLog

__all__ = [
    "AudioBackend",
    "MessageRegistry",
    "OperationsLog",
    "ResolveResult",
]
