"""
Domain layer for the code-generation pipeline.

Contains core data structures and pure logic with no external dependencies.
"""

from specforge.domain.exceptions import (
    CircuitOpenError,
    ConfigurationError,
    InvalidResponseError,
    NoProvidersError,
    PhaseFailedError,
    ProviderError,
    ProviderInitializationError,
    SpecforgeError,
    TemplateNotFoundError,
    UnsafePathError,
    ValidationFailedError,
)
from specforge.domain.file_organization import FileOrganizationService
from specforge.domain.interfaces import LLMProviderInterface, NotifierInterface
from specforge.domain.models import (
    ArtifactMetadata,
    CircuitState,
    CodeArtifact,
    ComponentSpec,
    GenerationPhase,
    GenerationStage,
    Notification,
    PhaseMetadata,
    PhaseResult,
    PipelineConfig,
    PromptBlueprint,
    PromptChunk,
    ProviderConfig,
    ProviderType,
    Severity,
    ValidationReport,
)
from specforge.domain.prompts import PromptEngineeringService

__all__ = [
    # Models
    "ArtifactMetadata",
    "CircuitState",
    "CodeArtifact",
    "ComponentSpec",
    "GenerationPhase",
    "GenerationStage",
    "Notification",
    "PhaseMetadata",
    "PhaseResult",
    "PipelineConfig",
    "PromptBlueprint",
    "PromptChunk",
    "ProviderConfig",
    "ProviderType",
    "Severity",
    "ValidationReport",
    # Services (pure)
    "FileOrganizationService",
    "PromptEngineeringService",
    # Interfaces
    "LLMProviderInterface",
    "NotifierInterface",
    # Exceptions
    "SpecforgeError",
    "ConfigurationError",
    "NoProvidersError",
    "ProviderInitializationError",
    "ProviderError",
    "InvalidResponseError",
    "ValidationFailedError",
    "PhaseFailedError",
    "CircuitOpenError",
    "TemplateNotFoundError",
    "UnsafePathError",
]
