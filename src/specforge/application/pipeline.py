"""
GenerationPipeline: N-phase sequential runner over LLM providers.

Phases execute strictly in configuration order. Each phase renders its
template against the running context, then tries every provider on every
retry attempt until one output passes validation. Between phases an optional
context builder turns phase outputs into new context values.

Results accumulate across execute() calls until reset() is called: a second
execute() overwrites same-named phases and keeps the others.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from specforge.application.notification_emitter import NotificationEmitter
from specforge.application.responses import generate_validated
from specforge.domain.exceptions import (
    NoProvidersError,
    PhaseFailedError,
    ValidationFailedError,
)
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import (
    GenerationPhase,
    PhaseMetadata,
    PhaseResult,
    PipelineConfig,
    PromptBlueprint,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """Substitute {key} placeholders; unknown placeholders are left as-is."""

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in context:
            return str(context[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(substitute, template)


class GenerationPipeline:
    """
    Runs configured phases against registered providers.

    Example:
        pipeline = GenerationPipeline(PipelineConfig(phases=(
            GenerationPhase("design", "Design: {requirements}"),
            GenerationPhase("code", "Implement: {design}"),
        ), context_builder=lambda outputs: dict(outputs)))
        pipeline.register_providers([provider])
        results = pipeline.execute({"requirements": "a todo app"})
    """

    def __init__(
        self,
        config: PipelineConfig,
        notifications: NotificationEmitter | None = None,
    ):
        self._config = config
        self._notifications = notifications or NotificationEmitter()
        self._providers: list[LLMProviderInterface] = []
        self._results: dict[str, PhaseResult] = {}

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def results(self) -> dict[str, PhaseResult]:
        return dict(self._results)

    def register_providers(self, providers: Sequence[LLMProviderInterface]) -> None:
        self._providers = list(providers)

    def execute(
        self, initial_context: Mapping[str, Any] | None = None
    ) -> dict[str, PhaseResult]:
        """
        Run every phase in order.

        Returns:
            Phase name -> PhaseResult for every phase recorded so far

        Raises:
            NoProvidersError: If no providers are registered
            Exception: The failing phase's last error; later phases do not run
        """
        if not self._providers:
            self._notifications.error(
                "No AI Providers",
                "Please register at least one LLM provider before execution.",
            )
            raise NoProvidersError("No AI providers registered with the pipeline")

        context: dict[str, Any] = dict(initial_context or {})

        for phase in self._config.phases:
            try:
                result = self._execute_phase(phase, context)
            except Exception:
                logger.exception("Phase %s failed", phase.name)
                self._notifications.error(
                    "Generation Phase Failed",
                    f"The {phase.name} phase could not be completed successfully.",
                )
                raise

            self._results[phase.name] = result

            if self._config.context_builder is not None:
                outputs = {name: r.output for name, r in self._results.items()}
                context = {**context, **self._config.context_builder(outputs)}

        if self._config.debug_mode:
            logger.info(
                "Pipeline execution results: %s",
                {name: len(r.output) for name, r in self._results.items()},
            )

        return self.results

    def get_phase_result(self, phase_name: str) -> PhaseResult | None:
        return self._results.get(phase_name)

    def reset(self) -> None:
        """Clear all results and start fresh."""
        self._results = {}

    def _execute_phase(
        self, phase: GenerationPhase, context: Mapping[str, Any]
    ) -> PhaseResult:
        for provider in self._providers:
            provider.initialize()

        blueprint = PromptBlueprint(
            context=render_template(phase.prompt_template, context),
            stage=phase.name,
            constraints={
                "temperature": phase.temperature,
                "maxTokens": phase.max_tokens,
            },
        )
        last_error: Exception | None = None

        for attempt in range(phase.retry_count + 1):
            for provider in self._providers:
                try:
                    output = generate_validated(provider, blueprint)

                    report = None
                    if phase.validation is not None:
                        report = phase.validation(output)
                        if not report.is_valid:
                            self._log_debug(
                                "Validation failed for %s: %s",
                                phase.name,
                                report.errors,
                            )
                            if attempt < phase.retry_count:
                                raise ValidationFailedError(report.errors)

                    return PhaseResult(
                        phase_name=phase.name,
                        output=output,
                        validation_report=report,
                        metadata=PhaseMetadata(
                            provider=provider.name,
                            timestamp=datetime.now(UTC).isoformat(),
                            retry_count=attempt,
                        ),
                    )
                except Exception as e:
                    last_error = e
                    self._log_debug("Provider %s failed: %s", provider.name, e)

        if last_error is not None:
            raise last_error
        raise PhaseFailedError(phase.name)

    def _log_debug(self, msg: str, *args: Any) -> None:
        level = logging.WARNING if self._config.debug_mode else logging.DEBUG
        logger.log(level, msg, *args)
