"""
Domain interfaces (Ports) for the code-generation pipeline.

These abstract base classes define the contracts that adapters must satisfy.
They have no external dependencies and represent the core domain boundaries.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from specforge.domain.models import Notification, PromptBlueprint, PromptChunk


class LLMProviderInterface(ABC):
    """
    Port for LLM vendors.

    Implementations turn a PromptBlueprint into a sequence of PromptChunks.
    A full response is the concatenation of every chunk's content.

    Note (Failure semantics):
        generate() signals failure by raising. Callers treat a raised error
        as "this provider failed for this request" and move on to the next
        provider; it is never fatal on its own.
    """

    @property
    def name(self) -> str:
        """Identifier used in artifact metadata and breaker keys."""
        return self.__class__.__name__

    @abstractmethod
    def initialize(self) -> None:
        """
        Cheap connectivity/credential check.

        Must be called before generate().

        Raises:
            ProviderInitializationError: If the provider cannot be used
        """
        pass

    @abstractmethod
    def generate(self, blueprint: "PromptBlueprint") -> "Iterator[PromptChunk]":
        """
        Issue one vendor call for the blueprint.

        Args:
            blueprint: Stage, context, requirements and constraints

        Returns:
            Iterator over response chunks

        Raises:
            ProviderError: If the vendor call fails
        """
        pass

    @abstractmethod
    def validate_response(self, response: str) -> bool:
        """Heuristic shape gate for a concatenated response."""
        pass


class NotifierInterface(ABC):
    """
    Port for the user-facing notification side channel.

    Receives milestones and terminal failures as short title/description
    pairs. Return values of the core operations carry no diagnosis, so
    this stream is the only place failures are explained.
    """

    @abstractmethod
    def notify(self, notification: "Notification") -> None:
        pass
