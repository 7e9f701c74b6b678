"""
OpenAI provider implementation.

Uses the openai SDK's chat completions API without streaming.
"""

import logging
from typing import Any, cast

from specforge.domain.exceptions import ProviderError, ProviderInitializationError
from specforge.domain.models import ProviderConfig
from specforge.infrastructure.llm.base import (
    DEFAULT_TIMEOUT,
    SYSTEM_PROMPT,
    BaseLLMProvider,
    vendor_error_message,
)

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """Generates code through the OpenAI chat completions API."""

    default_model = "gpt-4o-mini"
    init_failure_message = "Could not connect to OpenAI API. Please check your API key."

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
            client: Pre-built OpenAI client (tests)
        """
        super().__init__(config, timeout=timeout, **kwargs)

        try:
            import openai
        except ImportError as err:
            raise ImportError("openai library required: pip install openai") from err

        self._api_error = openai.APIError
        self._client = client or openai.OpenAI(
            api_key=self._client_api_key(),
            base_url=self._base_url(),
            timeout=timeout,
        )

    def _client_api_key(self) -> str:
        return self._config.api_key

    def _base_url(self) -> str | None:
        return self._config.endpoint

    def initialize(self) -> None:
        try:
            self._client.models.list()
        except self._api_error as err:
            logger.error("%s initialization error: %s", self.name, err)
            raise ProviderInitializationError(
                self.name, self.init_failure_message
            ) from err
        logger.info("%s initialized successfully", self.name)

    def _complete(
        self, prompt: str, temperature: float, max_tokens: int
    ) -> tuple[str, str | None]:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=cast(Any, messages),
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )
        except self._api_error as err:
            raise ProviderError(
                self.name,
                vendor_error_message(err, "OpenAI API error"),
                getattr(err, "status_code", None),
            ) from err

        content = response.choices[0].message.content or ""
        return content, response.model
