"""
Provider Registry with Entry Points Discovery.

Maps provider type tags to LLMProviderInterface implementations. The built-in
tags (openai, anthropic, local) are always available; external packages can
register more in their pyproject.toml:

    [project.entry-points."specforge.providers"]
    mistral = "mypackage.providers:MistralProvider"
"""

import warnings
from importlib.metadata import entry_points
from typing import Any

from specforge.domain.exceptions import ConfigurationError
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import ProviderConfig, ProviderType
from specforge.infrastructure.llm import AnthropicProvider, LocalProvider, OpenAIProvider

ENTRY_POINT_GROUP = "specforge.providers"

BUILTIN_PROVIDERS: dict[str, type[LLMProviderInterface]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.LOCAL: LocalProvider,
}


class ProviderRegistry:
    """
    Registry for LLMProviderInterface implementations, keyed by type tag.

    Entry points are only loaded on first lookup.

    Example usage:
        provider = ProviderRegistry.create(
            ProviderConfig(type=ProviderType.OPENAI, api_key="sk-...")
        )
    """

    _providers: dict[str, type[LLMProviderInterface]] = dict(BUILTIN_PROVIDERS)
    _loaded: bool = False

    @classmethod
    def _load_entry_points(cls) -> None:
        """Load providers from entry points (lazy, called once)."""
        if cls._loaded:
            return

        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                cls._providers[ep.name] = ep.load()
            except Exception as e:
                warnings.warn(
                    f"Failed to load provider '{ep.name}' from entry point: {e}",
                    stacklevel=2,
                )

        cls._loaded = True

    @classmethod
    def register(cls, tag: str, provider_class: type[LLMProviderInterface]) -> None:
        """
        Manually register a provider class.

        Args:
            tag: Provider type tag (e.g., "openai")
            provider_class: Class implementing LLMProviderInterface
        """
        cls._providers[str(tag)] = provider_class

    @classmethod
    def get(cls, tag: str) -> type[LLMProviderInterface]:
        """
        Get a provider class by type tag.

        Raises:
            ConfigurationError: If no provider is registered for the tag
        """
        cls._load_entry_points()
        key = str(tag)
        if key not in cls._providers:
            available = ", ".join(cls._providers.keys()) or "(none)"
            raise ConfigurationError(
                f"Unsupported provider type: {key}. Available providers: {available}"
            )
        return cls._providers[key]

    @classmethod
    def create(cls, config: ProviderConfig, **kwargs: Any) -> LLMProviderInterface:
        """
        Create a provider instance for a configuration.

        Args:
            config: Provider configuration; its type selects the class
            **kwargs: Extra constructor arguments (e.g. timeout)

        Raises:
            ConfigurationError: If the type tag is unknown
        """
        return cls.get(config.type)(config, **kwargs)

    @classmethod
    def available(cls) -> list[str]:
        cls._load_entry_points()
        return list(cls._providers.keys())

    @classmethod
    def clear(cls) -> None:
        """
        Drop manual registrations and restore the built-in providers.

        Also resets the loaded flag so entry points can be reloaded.
        """
        cls._providers = dict(BUILTIN_PROVIDERS)
        cls._loaded = False
