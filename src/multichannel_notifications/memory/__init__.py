"""Memory adapters for testing and development."""

from __future__ import annotations

from .console import ConsoleStrategy
from .fake import InMemoryStrategy

__all__ = ["ConsoleStrategy", "InMemoryStrategy"]
