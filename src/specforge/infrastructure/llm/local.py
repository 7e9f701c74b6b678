"""
Local LLM provider implementation.

Connects to Ollama (or any server exposing the OpenAI-compatible API).
"""

from specforge.infrastructure.llm.openai_provider import OpenAIProvider

DEFAULT_OLLAMA_URL = "http://localhost:11434/v1"


class LocalProvider(OpenAIProvider):
    """Connects to a local model server using the OpenAI-compatible API."""

    default_model = "qwen2.5-coder:7b"
    init_failure_message = "Could not reach the local model server."

    def _client_api_key(self) -> str:
        return self._config.api_key or "ollama"  # required but unused

    def _base_url(self) -> str:
        return self._config.endpoint or DEFAULT_OLLAMA_URL
