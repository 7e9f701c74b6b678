"""
Anthropic provider implementation.

Uses the anthropic SDK's messages API. The SDK sends the API version header.
"""

import logging
from typing import Any

from specforge.domain.exceptions import ProviderError, ProviderInitializationError
from specforge.domain.models import ProviderConfig
from specforge.infrastructure.llm.base import (
    DEFAULT_TIMEOUT,
    SYSTEM_PROMPT,
    BaseLLMProvider,
    vendor_error_message,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """Generates code through the Anthropic messages API."""

    default_model = "claude-3-5-sonnet-latest"

    def __init__(
        self,
        config: ProviderConfig,
        timeout: float = DEFAULT_TIMEOUT,
        client: Any = None,
        **kwargs: Any,
    ):
        """
        Args:
            config: Provider configuration; endpoint overrides the base URL
            timeout: Request timeout in seconds
            client: Pre-built Anthropic client (tests)
        """
        super().__init__(config, timeout=timeout, **kwargs)

        try:
            import anthropic
        except ImportError as err:
            raise ImportError(
                "anthropic library required: pip install anthropic"
            ) from err

        self._api_error = anthropic.APIError
        self._client = client or anthropic.Anthropic(
            api_key=config.api_key,
            base_url=config.endpoint,
            timeout=timeout,
        )

    def initialize(self) -> None:
        try:
            self._client.models.list(limit=1)
        except self._api_error as err:
            logger.error("%s initialization error: %s", self.name, err)
            raise ProviderInitializationError(
                self.name,
                "Could not connect to Anthropic API. Please check your API key.",
            ) from err
        logger.info("%s initialized", self.name)

    def _complete(
        self, prompt: str, temperature: float, max_tokens: int
    ) -> tuple[str, str | None]:
        try:
            response = self._client.messages.create(
                model=self._model,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except self._api_error as err:
            raise ProviderError(
                self.name,
                vendor_error_message(err, "Anthropic API error"),
                getattr(err, "status_code", None),
            ) from err

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        return text, response.model
