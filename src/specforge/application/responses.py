"""Helpers for consuming provider output."""

from specforge.domain.exceptions import InvalidResponseError
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import PromptBlueprint


def collect_response(provider: LLMProviderInterface, blueprint: PromptBlueprint) -> str:
    """Concatenate every chunk the provider yields for the blueprint."""
    return "".join(chunk.content for chunk in provider.generate(blueprint))


def generate_validated(
    provider: LLMProviderInterface, blueprint: PromptBlueprint
) -> str:
    """
    Collect a response and gate it with the provider's validate_response.

    Raises:
        InvalidResponseError: If the response shape is rejected
    """
    response = collect_response(provider, blueprint)
    if not provider.validate_response(response):
        raise InvalidResponseError(provider.name)
    return response
