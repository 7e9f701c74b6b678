"""Tests for OpenAIProvider and LocalProvider with a mocked SDK client."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

openai = pytest.importorskip("openai")
httpx = pytest.importorskip("httpx")

from specforge.domain.exceptions import ProviderError, ProviderInitializationError  # noqa: E402
from specforge.domain.models import PromptBlueprint, ProviderConfig, ProviderType  # noqa: E402
from specforge.infrastructure.llm import LocalProvider, OpenAIProvider  # noqa: E402
from specforge.infrastructure.llm.base import SYSTEM_PROMPT  # noqa: E402
from specforge.infrastructure.llm.local import DEFAULT_OLLAMA_URL  # noqa: E402

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content: str | None, model: str = "gpt-4o-mini-2024") -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        model=model,
    )


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create.return_value = _completion("const a = 1;")
    return client


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(type=ProviderType.OPENAI, api_key="sk-test")


class TestOpenAIProvider:
    def test_generate_calls_chat_completions(self, client, config, sample_blueprint) -> None:
        provider = OpenAIProvider(config, client=client)

        chunks = list(provider.generate(sample_blueprint))

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 1000
        assert kwargs["stream"] is False
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert kwargs["messages"][1]["content"].startswith("# IMPLEMENTATION STAGE")
        assert chunks[0].content == "const a = 1;"
        assert chunks[0].metadata["model"] == "gpt-4o-mini-2024"
        assert chunks[0].metadata["provider"] == "OpenAIProvider"

    def test_empty_content_becomes_empty_string(self, client, config) -> None:
        client.chat.completions.create.return_value = _completion(None)
        provider = OpenAIProvider(config, client=client)

        chunks = list(provider.generate(PromptBlueprint(context="c", stage="s")))

        assert chunks[0].content == ""

    def test_api_error_wrapped(self, client, config, sample_blueprint) -> None:
        client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=REQUEST
        )
        provider = OpenAIProvider(config, client=client)

        with pytest.raises(ProviderError) as exc_info:
            list(provider.generate(sample_blueprint))

        assert exc_info.value.provider == "OpenAIProvider"
        assert str(exc_info.value) == "Connection error."

    def test_status_error_surfaces_vendor_message(
        self, client, config, sample_blueprint
    ) -> None:
        client.chat.completions.create.side_effect = openai.AuthenticationError(
            "Error code: 401 - {'error': {'message': 'Incorrect API key provided'}}",
            response=httpx.Response(401, request=REQUEST),
            body={"message": "Incorrect API key provided", "type": "invalid_request_error"},
        )
        provider = OpenAIProvider(config, client=client)

        with pytest.raises(ProviderError) as exc_info:
            list(provider.generate(sample_blueprint))

        assert str(exc_info.value) == "Incorrect API key provided"
        assert exc_info.value.status_code == 401

    def test_initialize_lists_models(self, client, config) -> None:
        OpenAIProvider(config, client=client).initialize()

        client.models.list.assert_called_once_with()

    def test_initialize_failure(self, client, config) -> None:
        client.models.list.side_effect = openai.APIConnectionError(request=REQUEST)

        with pytest.raises(ProviderInitializationError, match="check your API key"):
            OpenAIProvider(config, client=client).initialize()

    def test_client_built_from_config(self) -> None:
        config = ProviderConfig(
            type=ProviderType.OPENAI, api_key="sk-x", endpoint="https://proxy/v1"
        )
        with patch("openai.OpenAI") as mock_cls:
            OpenAIProvider(config, timeout=30.0)

        mock_cls.assert_called_once_with(
            api_key="sk-x", base_url="https://proxy/v1", timeout=30.0
        )


class TestLocalProvider:
    def test_defaults_to_ollama(self) -> None:
        config = ProviderConfig(type=ProviderType.LOCAL, api_key="")
        with patch("openai.OpenAI") as mock_cls:
            provider = LocalProvider(config)

        mock_cls.assert_called_once_with(
            api_key="ollama", base_url=DEFAULT_OLLAMA_URL, timeout=120.0
        )
        assert provider.model == "qwen2.5-coder:7b"

    def test_initialize_failure_message(self, client) -> None:
        client.models.list.side_effect = openai.APIConnectionError(request=REQUEST)
        provider = LocalProvider(
            ProviderConfig(type=ProviderType.LOCAL, api_key=""), client=client
        )

        with pytest.raises(ProviderInitializationError, match="local model server"):
            provider.initialize()
