"""
LLM provider adapters.
"""

from specforge.infrastructure.llm.anthropic_provider import AnthropicProvider
from specforge.infrastructure.llm.base import BaseLLMProvider, format_prompt
from specforge.infrastructure.llm.local import LocalProvider
from specforge.infrastructure.llm.mock import MockProvider
from specforge.infrastructure.llm.openai_provider import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "BaseLLMProvider",
    "LocalProvider",
    "MockProvider",
    "OpenAIProvider",
    "format_prompt",
]
