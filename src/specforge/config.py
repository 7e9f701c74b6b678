"""
Settings and pipeline configuration loading.

Settings come from an optional JSON file, completed from environment
variables. Pipeline descriptions are separate JSON files listing phases.
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from specforge.domain.exceptions import ConfigurationError
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import (
    ContextBuilder,
    GenerationPhase,
    PipelineConfig,
    ProviderConfig,
    ProviderType,
)
from specforge.guards.phase import (
    extract_components,
    extract_types,
    validate_code_generation,
)

ENV_API_KEYS = {
    ProviderType.OPENAI: "OPENAI_API_KEY",
    ProviderType.ANTHROPIC: "ANTHROPIC_API_KEY",
}
ENV_SCHEMA_FILE = "SPECFORGE_DATABASE_SCHEMA_FILE"
ENV_DATABASE_TYPE = "SPECFORGE_DATABASE_TYPE"

VALIDATIONS = {"code": validate_code_generation}


# =============================================================================
# SETTINGS
# =============================================================================


class ProviderSettings(BaseModel):
    """One configured LLM provider."""

    model_config = ConfigDict(extra="forbid")

    type: ProviderType
    api_key: str = ""
    endpoint: str | None = None
    rate_limit: int | None = Field(default=None, gt=0, description="Requests per minute")
    model: str | None = None

    def to_config(self) -> ProviderConfig:
        return ProviderConfig(
            type=self.type,
            api_key=self.api_key,
            endpoint=self.endpoint,
            rate_limit=self.rate_limit,
            model=self.model,
        )


class BreakerSettings(BaseModel):
    """Per-provider circuit breaker thresholds."""

    model_config = ConfigDict(extra="forbid")

    failure_threshold: int = Field(default=5, ge=1)
    recovery_timeout: float = Field(default=60.0, gt=0)


class Settings(BaseModel):
    """Everything a generation run needs besides its inputs."""

    model_config = ConfigDict(extra="forbid")

    providers: list[ProviderSettings] = Field(default_factory=list)
    database_schema: str | None = None
    database_type: str = "prisma"
    breaker: BreakerSettings = Field(default_factory=BreakerSettings)
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")

    def provider_configs(self) -> list[ProviderConfig]:
        return [p.to_config() for p in self.providers]


def _read_json(path: Path, kind: str) -> Any:
    if not path.exists():
        raise ConfigurationError(f"{kind} file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e


def load_settings(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> Settings:
    """
    Load settings from a JSON file and the environment.

    Providers come from OPENAI_API_KEY / ANTHROPIC_API_KEY only when the file
    configures none. SPECFORGE_DATABASE_SCHEMA_FILE and
    SPECFORGE_DATABASE_TYPE fill the database fields the file leaves unset.

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    if path is not None:
        data = _read_json(Path(path), "Settings")
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected dict in {path}, got {type(data).__name__}"
            )

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

    if not settings.providers:
        settings.providers = [
            ProviderSettings(type=provider_type, api_key=env[var])
            for provider_type, var in ENV_API_KEYS.items()
            if env.get(var)
        ]

    if settings.database_schema is None and env.get(ENV_SCHEMA_FILE):
        schema_path = Path(env[ENV_SCHEMA_FILE])
        if not schema_path.exists():
            raise ConfigurationError(f"Database schema file not found: {schema_path}")
        settings.database_schema = schema_path.read_text(encoding="utf-8")

    if "database_type" not in settings.model_fields_set and env.get(ENV_DATABASE_TYPE):
        settings.database_type = env[ENV_DATABASE_TYPE]

    return settings


def create_providers(settings: Settings) -> list[LLMProviderInterface]:
    """Instantiate every configured provider, in configuration order."""
    from specforge.infrastructure.registry import ProviderRegistry

    return [
        ProviderRegistry.create(config, timeout=settings.timeout)
        for config in settings.provider_configs()
    ]


# =============================================================================
# PIPELINE FILES
# =============================================================================


class PhaseSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    prompt_template: str
    temperature: float = Field(default=0.4, ge=0, le=2)
    max_tokens: int = Field(default=2000, gt=0)
    retry_count: int = Field(default=2, ge=0)
    validation: Literal["code"] | None = None

    def to_phase(self) -> GenerationPhase:
        return GenerationPhase(
            name=self.name,
            prompt_template=self.prompt_template,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            validation=VALIDATIONS[self.validation] if self.validation else None,
            retry_count=self.retry_count,
        )


class PipelineSettings(BaseModel):
    """
    JSON pipeline description.

    With pass_outputs, each phase's output becomes the {<phase name>}
    placeholder for later phases, alongside {components} and {types}
    extracted from the outputs so far.
    """

    model_config = ConfigDict(extra="forbid")

    phases: list[PhaseSettings] = Field(min_length=1)
    pass_outputs: bool = True
    debug_mode: bool = False


def phase_outputs_context(outputs: dict[str, str]) -> dict[str, Any]:
    """Context builder passing phase outputs and extracted declarations forward."""
    return {
        **outputs,
        "components": ", ".join(extract_components(outputs)),
        "types": ", ".join(extract_types(outputs)),
    }


def load_pipeline_config(path: str | Path) -> PipelineConfig:
    """
    Load a pipeline description.

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    data = _read_json(Path(path), "Pipeline")
    try:
        settings = PipelineSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid pipeline in {path}: {e}") from e

    context_builder: ContextBuilder | None = (
        phase_outputs_context if settings.pass_outputs else None
    )
    return PipelineConfig(
        phases=tuple(p.to_phase() for p in settings.phases),
        context_builder=context_builder,
        debug_mode=settings.debug_mode,
    )
