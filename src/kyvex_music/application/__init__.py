"""
Application Layer

Orchestrates domain objects and infrastructure to fulfil commands.

Structure:
- commands/: Tagged command objects and the chat-message parser
- services/: Playback and queue application services
- interfaces/: Port interfaces for infrastructure adapters
"""
