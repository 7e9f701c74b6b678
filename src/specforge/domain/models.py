"""
Domain models for the code-generation pipeline.

Pure data structures shared by every layer. Value objects are frozen
dataclasses; only CodeArtifact is mutable because later generation rounds
merge files into it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

# =============================================================================
# TAGS
# =============================================================================


class ProviderType(StrEnum):
    """Closed set of LLM vendor tags."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    LOCAL = "local"


class GenerationStage(StrEnum):
    """Fixed stages of single-component generation."""

    ANALYSIS = "analysis"
    ARCHITECTURE = "architecture"
    IMPLEMENTATION = "implementation"


class CircuitState(StrEnum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing fast
    HALF_OPEN = "half_open"  # Probing with the next call


class Severity(StrEnum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# =============================================================================
# PROVIDER INPUTS AND OUTPUTS
# =============================================================================


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable configuration for one provider adapter."""

    type: ProviderType
    api_key: str
    endpoint: str | None = None  # Overrides the SDK base URL
    rate_limit: int | None = None  # Requests per minute
    model: str | None = None  # Overrides the adapter's default model


@dataclass(frozen=True)
class PromptBlueprint:
    """Structured input for a single LLM call. Created fresh per call."""

    context: str
    stage: str  # GenerationStage value, or a pipeline phase name
    requirements: tuple[str, ...] = ()
    constraints: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PromptChunk:
    """Unit yielded by a provider; a response is the concatenation of chunks."""

    content: str
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a validation function. Never persisted."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    coverage_score: float | None = None  # In [0, 1]


# =============================================================================
# ARTIFACTS
# =============================================================================


@dataclass(frozen=True)
class ArtifactMetadata:
    """Provenance of a generated artifact."""

    generated_at: datetime
    provider_used: str
    stage: GenerationStage


@dataclass
class CodeArtifact:
    """
    Output bundle of a generation run: relative path -> file content.

    Writing the same path twice replaces the previous content.
    """

    files: dict[str, str]
    metadata: ArtifactMetadata

    def merge(self, other: CodeArtifact) -> CodeArtifact:
        """
        Merge another artifact's files into this one (last writer wins).

        Metadata is taken from the other artifact, which is the newer run.
        """
        self.files.update(other.files)
        self.metadata = other.metadata
        return self

    @property
    def file_count(self) -> int:
        return len(self.files)


def new_artifact(
    files: dict[str, str], provider_used: str, stage: GenerationStage
) -> CodeArtifact:
    """Create an artifact stamped with the current UTC time."""
    return CodeArtifact(
        files=files,
        metadata=ArtifactMetadata(
            generated_at=datetime.now(UTC),
            provider_used=provider_used,
            stage=stage,
        ),
    )


@dataclass(frozen=True)
class ComponentSpec:
    """Input to single-component generation."""

    specification: str
    architecture: str | None = None
    constraints: tuple[str, ...] = ()


# =============================================================================
# PIPELINE
# =============================================================================

ValidationFunction = Callable[[str], ValidationReport]
ContextBuilder = Callable[[dict[str, str]], dict[str, Any]]


@dataclass(frozen=True)
class GenerationPhase:
    """One step of a GenerationPipeline."""

    name: str
    prompt_template: str  # Placeholders written as {key}
    temperature: float = 0.4
    max_tokens: int = 2000
    validation: ValidationFunction | None = None
    retry_count: int = 2


@dataclass(frozen=True)
class PhaseMetadata:
    provider: str
    timestamp: str  # ISO 8601
    retry_count: int  # Retry attempt that produced the output


@dataclass(frozen=True)
class PhaseResult:
    """Accepted output of one pipeline phase."""

    phase_name: str
    output: str
    metadata: PhaseMetadata
    validation_report: ValidationReport | None = None


@dataclass(frozen=True)
class PipelineConfig:
    """Ordered phases plus an optional context builder run between phases."""

    phases: tuple[GenerationPhase, ...]
    context_builder: ContextBuilder | None = None
    debug_mode: bool = False


# =============================================================================
# NOTIFICATIONS
# =============================================================================


@dataclass(frozen=True)
class Notification:
    """Short human-readable progress or error message."""

    title: str
    description: str
    severity: Severity = Severity.INFO
    created_at: str = ""  # ISO 8601
