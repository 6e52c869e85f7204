"""
Infrastructure Layer

Adapters for Discord, the Lavalink audio node, and on-disk storage.
"""
