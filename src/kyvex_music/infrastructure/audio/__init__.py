"""Audio infrastructure: the Lavalink-backed player."""

from kyvex_music.infrastructure.audio.wavelink_backend import WavelinkAudioBackend

__all__ = ["WavelinkAudioBackend"]
