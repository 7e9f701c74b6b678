"""
Shared behavior for vendor-backed LLM providers.

Subclasses only implement the vendor call; prompt formatting, request
parameters, rate limiting and response validation live here.
"""

import json
import time
from abc import abstractmethod
from collections.abc import Callable, Iterator, Mapping
from datetime import UTC, datetime
from typing import Any

from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import PromptBlueprint, PromptChunk, ProviderConfig

SYSTEM_PROMPT = (
    "You are a specialized code generation assistant. "
    "Generate clean, maintainable code that follows best practices."
)

DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TIMEOUT = 120.0

MIN_RESPONSE_LENGTH = 10
CODE_MARKERS = ("```", "class ", "function ", "const ", "import ")


def format_prompt(blueprint: PromptBlueprint) -> str:
    """Render a blueprint as the markdown prompt sent to the vendor."""
    parts = [
        f"# {str(blueprint.stage).upper()} STAGE\n\n",
        f"## Context\n{blueprint.context}\n\n",
    ]

    if blueprint.requirements:
        parts.append("## Requirements\n")
        parts.extend(
            f"{i}. {req}\n" for i, req in enumerate(blueprint.requirements, start=1)
        )
        parts.append("\n")

    if blueprint.constraints:
        parts.append("## Constraints\n")
        parts.extend(
            f"- {key}: {json.dumps(value, ensure_ascii=False, default=str)}\n"
            for key, value in blueprint.constraints.items()
            if value
        )

    return "".join(parts)


def request_parameters(constraints: Mapping[str, Any]) -> tuple[float, int]:
    """(temperature, max_tokens) from blueprint constraints, with defaults."""
    temperature = constraints.get("temperature")
    max_tokens = constraints.get("maxTokens")
    return (
        DEFAULT_TEMPERATURE if temperature is None else float(temperature),
        DEFAULT_MAX_TOKENS if max_tokens is None else int(max_tokens),
    )


def vendor_error_message(err: Exception, default: str) -> str:
    """
    The vendor's own error text for an SDK exception.

    Status errors carry the decoded JSON body: OpenAI hands over the inner
    error object, Anthropic the whole envelope with an "error" member. Falls
    back to the SDK message, which embeds the status code and raw body.
    """
    body = getattr(err, "body", None)
    if isinstance(body, Mapping):
        error = body.get("error", body)
        if isinstance(error, Mapping) and isinstance(error.get("message"), str):
            return error["message"]
    return getattr(err, "message", None) or default


def looks_like_code(response: str) -> bool:
    if len(response) < MIN_RESPONSE_LENGTH:
        return False
    return any(marker in response for marker in CODE_MARKERS)


class BaseLLMProvider(LLMProviderInterface):
    """
    Base class for providers that make one blocking vendor call per request.

    Each request yields a single chunk holding the whole response.
    """

    default_model: str = ""

    def __init__(
        self,
        config: ProviderConfig,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._model = config.model or self.default_model
        self._timeout = timeout
        self._clock = clock
        self._sleep = sleep
        self._min_interval = 60.0 / config.rate_limit if config.rate_limit else 0.0
        self._last_request: float | None = None

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def model(self) -> str:
        return self._model

    def generate(self, blueprint: PromptBlueprint) -> Iterator[PromptChunk]:
        self._throttle()
        temperature, max_tokens = request_parameters(blueprint.constraints)
        content, model = self._complete(
            format_prompt(blueprint), temperature, max_tokens
        )
        yield PromptChunk(
            content=content,
            metadata={
                "model": model or self._model,
                "provider": self.name,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    def validate_response(self, response: str) -> bool:
        return looks_like_code(response)

    @abstractmethod
    def _complete(
        self, prompt: str, temperature: float, max_tokens: int
    ) -> tuple[str, str | None]:
        """
        Make the vendor call.

        Returns:
            (response text, model reported by the vendor)

        Raises:
            ProviderError: If the vendor call fails
        """

    def _throttle(self) -> None:
        """Sleep until the configured requests-per-minute allows another call."""
        if self._min_interval and self._last_request is not None:
            wait = self._min_interval - (self._clock() - self._last_request)
            if wait > 0:
                self._sleep(wait)
        self._last_request = self._clock()
