"""
specforge: staged LLM code generation from specifications.

Turns a natural-language specification, or a directory-tree-style
architecture listing, into generated source files through a sequence of
LLM calls with provider fallback, circuit breaking and response parsing.

Example:
    from specforge import CodeGenerationService, ComponentSpec, ProviderConfig, ProviderType
    from specforge.infrastructure import ProviderRegistry

    provider = ProviderRegistry.create(
        ProviderConfig(type=ProviderType.OPENAI, api_key="sk-...")
    )
    service = CodeGenerationService([provider])
    artifact = service.generate_component(ComponentSpec("A todo list component"))
"""

# Application layer (orchestration)
from specforge.application import (
    CircuitBreaker,
    CircuitBreakerRegistry,
    CodeGenerationService,
    CodeParsingService,
    DatabaseGenerationService,
    GenerationPipeline,
    NotificationEmitter,
)

# Domain exceptions
from specforge.domain.exceptions import (
    CircuitOpenError,
    ConfigurationError,
    NoProvidersError,
    ProviderError,
    SpecforgeError,
)
from specforge.domain.file_organization import FileOrganizationService

# Domain interfaces (for type hints and custom implementations)
from specforge.domain.interfaces import LLMProviderInterface, NotifierInterface
from specforge.domain.models import (
    CodeArtifact,
    ComponentSpec,
    GenerationPhase,
    GenerationStage,
    PhaseResult,
    PipelineConfig,
    PromptBlueprint,
    PromptChunk,
    ProviderConfig,
    ProviderType,
    ValidationReport,
)
from specforge.domain.prompts import PromptEngineeringService

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Application
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CodeGenerationService",
    "CodeParsingService",
    "DatabaseGenerationService",
    "FileOrganizationService",
    "GenerationPipeline",
    "NotificationEmitter",
    "PromptEngineeringService",
    # Models
    "CodeArtifact",
    "ComponentSpec",
    "GenerationPhase",
    "GenerationStage",
    "PhaseResult",
    "PipelineConfig",
    "PromptBlueprint",
    "PromptChunk",
    "ProviderConfig",
    "ProviderType",
    "ValidationReport",
    # Interfaces
    "LLMProviderInterface",
    "NotifierInterface",
    # Exceptions
    "CircuitOpenError",
    "ConfigurationError",
    "NoProvidersError",
    "ProviderError",
    "SpecforgeError",
]
