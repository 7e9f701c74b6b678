"""Shared pytest fixtures for specforge tests."""

import pytest

from specforge.application.circuit_breaker import CircuitBreakerRegistry
from specforge.application.notification_emitter import NotificationEmitter
from specforge.domain.models import PromptBlueprint
from specforge.infrastructure.llm.mock import MockProvider
from specforge.infrastructure.notifications import InMemoryNotifier

CODE_RESPONSE = "```typescript:src/App.tsx\nexport const App = () => null;\n```"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> InMemoryNotifier:
    """Notifier that records every notification."""
    return InMemoryNotifier()


@pytest.fixture
def notifications(notifier: InMemoryNotifier) -> NotificationEmitter:
    return NotificationEmitter(notifier)


@pytest.fixture
def breakers(clock: FakeClock) -> CircuitBreakerRegistry:
    return CircuitBreakerRegistry(failure_threshold=3, recovery_timeout=30.0, clock=clock)


@pytest.fixture
def code_response() -> str:
    """A response that passes validate_response and parses into one file."""
    return CODE_RESPONSE


@pytest.fixture
def mock_provider(code_response: str) -> MockProvider:
    """Mock provider with enough valid responses for a three-stage run."""
    return MockProvider(
        responses=[
            "Analysis: const state = useState();",
            "Architecture: import React from 'react';",
            code_response,
        ]
    )


@pytest.fixture
def sample_blueprint() -> PromptBlueprint:
    return PromptBlueprint(
        context="Build a counter component",
        stage="implementation",
        requirements=("Use hooks", "Export by default"),
        constraints={"temperature": 0.5, "maxTokens": 1000},
    )
