"""
Infrastructure layer for specforge.

Contains adapters for external concerns (LLM vendors, notifications,
filesystem output, provider registry).
"""

from specforge.infrastructure.llm import (
    AnthropicProvider,
    LocalProvider,
    MockProvider,
    OpenAIProvider,
)
from specforge.infrastructure.notifications import (
    ConsoleNotifier,
    InMemoryNotifier,
)
from specforge.infrastructure.persistence import ArtifactWriter
from specforge.infrastructure.registry import ProviderRegistry

__all__ = [
    # LLM
    "AnthropicProvider",
    "LocalProvider",
    "MockProvider",
    "OpenAIProvider",
    # Notifications
    "ConsoleNotifier",
    "InMemoryNotifier",
    # Persistence
    "ArtifactWriter",
    # Registry
    "ProviderRegistry",
]
