"""
Mock provider for testing without an LLM.

Returns predefined responses in sequence.
"""

from collections.abc import Iterator, Sequence

from specforge.domain.exceptions import ProviderInitializationError
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import PromptBlueprint, PromptChunk
from specforge.infrastructure.llm.base import looks_like_code


class MockProvider(LLMProviderInterface):
    """Returns predefined responses for testing."""

    def __init__(
        self,
        responses: Sequence[str | Exception],
        name: str = "MockProvider",
        fail_initialize: bool = False,
    ):
        """
        Args:
            responses: Responses returned in sequence; an Exception is raised
                instead of returned
            name: Provider name reported in metadata and breaker keys
            fail_initialize: Make initialize() raise
        """
        self._responses = list(responses)
        self._name = name
        self._fail_initialize = fail_initialize
        self._call_count = 0
        self._init_count = 0
        self._blueprints: list[PromptBlueprint] = []

    @property
    def name(self) -> str:
        return self._name

    def initialize(self) -> None:
        self._init_count += 1
        if self._fail_initialize:
            raise ProviderInitializationError(self._name, "mock initialization failure")

    def generate(self, blueprint: PromptBlueprint) -> Iterator[PromptChunk]:
        """Yield the next predefined response."""
        if self._call_count >= len(self._responses):
            raise RuntimeError("MockProvider exhausted responses")

        response = self._responses[self._call_count]
        self._call_count += 1
        self._blueprints.append(blueprint)

        if isinstance(response, Exception):
            raise response
        yield PromptChunk(content=response, metadata={"provider": self._name})

    def validate_response(self, response: str) -> bool:
        return looks_like_code(response)

    @property
    def call_count(self) -> int:
        """Number of times generate() has been called."""
        return self._call_count

    @property
    def init_count(self) -> int:
        return self._init_count

    @property
    def blueprints(self) -> list[PromptBlueprint]:
        """Blueprints received by generate(), in call order."""
        return list(self._blueprints)

    def reset(self) -> None:
        """Reset the call counter to reuse responses."""
        self._call_count = 0
        self._blueprints = []
