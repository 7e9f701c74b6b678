"""
CodeGenerationService: top-level entry point for code generation.

Two operations:
- generate_component: analysis -> architecture -> implementation, each
  stage's winning output becoming the next stage's context.
- generate_files_from_architecture: one generation call per file listed in
  an architecture text, in dependency-light-first order, each prompt
  carrying context from files generated earlier in the run.

Execution is strictly sequential. Every provider attempt runs through that
provider's circuit breaker, so a failing provider is skipped for the
recovery window without blocking the others.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

from specforge.application.circuit_breaker import CircuitBreakerRegistry
from specforge.application.code_parsing import CodeParsingService
from specforge.application.database import (
    PRISMA,
    DatabaseGenerationService,
    is_database_path,
)
from specforge.application.notification_emitter import NotificationEmitter
from specforge.application.responses import generate_validated
from specforge.domain.file_organization import FileOrganizationService
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import (
    CodeArtifact,
    ComponentSpec,
    GenerationStage,
    PromptBlueprint,
    new_artifact,
)
from specforge.domain.prompts import FILES_CONTEXT_KEY, PromptEngineeringService

logger = logging.getLogger(__name__)

COMPONENT_STAGES = (
    GenerationStage.ANALYSIS,
    GenerationStage.ARCHITECTURE,
    GenerationStage.IMPLEMENTATION,
)

_COMMENT_PREFIXES = ("#", "//")


def architecture_lines(architecture: str) -> list[str]:
    """Non-empty, non-comment lines of an architecture text, stripped."""
    return [
        line
        for line in (raw.strip() for raw in architecture.split("\n"))
        if line and not line.startswith(_COMMENT_PREFIXES)
    ]


class CodeGenerationService:
    """Combines prompts, providers, parsing and ordering into generation runs."""

    def __init__(
        self,
        providers: Sequence[LLMProviderInterface],
        notifications: NotificationEmitter | None = None,
        breakers: CircuitBreakerRegistry | None = None,
        prompt_service: PromptEngineeringService | None = None,
        file_organizer: FileOrganizationService | None = None,
        parser: CodeParsingService | None = None,
        database_service: DatabaseGenerationService | None = None,
    ):
        """
        Args:
            providers: Providers tried in order for every stage and file
            notifications: Progress/error side channel (logging if None)
            breakers: Per-provider circuit breakers (defaults if None)
            prompt_service: Stage template renderer
            file_organizer: Generation ordering and files context
            parser: Response parsing and shallow validation
            database_service: Database file generation
        """
        self._providers = list(providers)
        self._notifications = notifications or NotificationEmitter()
        self._breakers = breakers or CircuitBreakerRegistry()
        self._prompts = prompt_service or PromptEngineeringService()
        self._organizer = file_organizer or FileOrganizationService()
        self._parser = parser or CodeParsingService(self._notifications)
        self._database = database_service or DatabaseGenerationService(
            self._parser, self._notifications
        )

    @property
    def providers(self) -> list[LLMProviderInterface]:
        return list(self._providers)

    @property
    def breakers(self) -> CircuitBreakerRegistry:
        return self._breakers

    # =========================================================================
    # SINGLE COMPONENT
    # =========================================================================

    def generate_component(self, spec: ComponentSpec) -> CodeArtifact | None:
        """
        Run analysis, architecture and implementation stages.

        Returns:
            The implementation stage's artifact, or None if configuration is
            invalid, initialization fails, or any stage exhausts its providers
        """
        if not self._has_providers():
            return None
        if not spec.specification.strip():
            self._notifications.error(
                "Specification Required",
                "Provide a specification before generating code.",
            )
            return None

        try:
            self._initialize_providers()
        except Exception:
            logger.exception("Failed to initialize providers")
            self._notifications.error(
                "Initialization Failed",
                "One or more providers failed to initialize.",
            )
            return None

        current_context = spec.specification
        final_artifact: CodeArtifact | None = None

        for stage in COMPONENT_STAGES:
            blueprint = PromptBlueprint(
                context=current_context,
                stage=stage,
                constraints={
                    "architecture": spec.architecture,
                    "additionalConstraints": list(spec.constraints),
                },
            )
            try:
                winner = self._generate_with_providers(blueprint, f"{stage} stage")
            except Exception:
                logger.exception("Stage generation failed: %s", stage)
                self._notifications.error(
                    "Generation Error", f"Failed to generate {stage} stage."
                )
                return None

            if winner is None:
                self._notifications.error(
                    "Generation Failed",
                    f"No provider could generate valid code for {stage} stage.",
                )
                return None

            provider, response = winner
            if stage == GenerationStage.IMPLEMENTATION:
                files = self._parser.parse_code_blocks(response)
                report = self._parser.validate_code(files)
                if not report.is_valid:
                    logger.warning("Code validation issues: %s", report.errors)
                final_artifact = new_artifact(files, provider.name, stage)
            else:
                logger.debug("Stage %s completed by %s", stage, provider.name)
            current_context = response

        return final_artifact

    # =========================================================================
    # ARCHITECTURE-DRIVEN MULTI-FILE
    # =========================================================================

    def generate_files_from_architecture(
        self,
        architecture: str,
        constraints: Sequence[str] | None = None,
        *,
        database_schema: str | None = None,
        database_type: str = PRISMA,
    ) -> CodeArtifact | None:
        """
        Generate one file per architecture path, in generation order.

        Every file parsed from a response is merged into the result, not
        only the requested path. A file whose providers all fail is reported
        and left out; the remaining files are still generated.

        Args:
            architecture: Directory-tree-style listing, one path per line
            constraints: Free-text constraints added to every prompt
            database_schema: Schema to generate database files from first
            database_type: Database flavor, e.g. "prisma"

        Returns:
            Artifact of all generated files, or None if none were produced

        Raises:
            ProviderInitializationError: If a provider fails to initialize
        """
        if not self._has_providers():
            return None

        file_paths = self._organizer.organize_file_paths_by_hierarchy(
            architecture_lines(architecture)
        )
        if not database_schema and not any(
            path and not path.endswith("/") for path in file_paths
        ):
            self._notify_no_files()
            return None

        self._initialize_providers()
        files: dict[str, str] = {}

        if database_schema:
            self._database.generate_database_files(
                self._providers, database_schema, database_type, files
            )

        total_files = len(file_paths)
        completed_files = 0
        self._notifications.info(
            "Starting File Generation",
            f"Generating {total_files} files from architecture...",
        )

        db_context = (
            f"\n\nDatabase Schema: {database_schema}\nDatabase Type: {database_type}"
            if database_schema
            else ""
        )

        for file_path in file_paths:
            if not file_path or file_path.endswith("/"):
                continue
            if database_schema and is_database_path(file_path):
                continue

            completed_files += 1
            blueprint = PromptBlueprint(
                context=(
                    f"Generate file: {file_path}\n\n"
                    f"Full architecture context: {architecture}{db_context}"
                ),
                stage=GenerationStage.IMPLEMENTATION,
                constraints={
                    "filePath": file_path,
                    "totalFiles": total_files,
                    "completedFiles": completed_files,
                    "additionalConstraints": list(constraints or ()),
                    "databaseType": database_type,
                    "hasDatabaseSchema": bool(database_schema),
                    FILES_CONTEXT_KEY: self._organizer.create_files_context(
                        files, file_path
                    ),
                },
            )
            self._notifications.info(
                "Generating File",
                f"Processing {file_path} ({completed_files}/{total_files})",
            )

            try:
                winner = self._generate_with_providers(blueprint, f"file {file_path}")
            except Exception:
                logger.exception("Generation failed for %s", file_path)
                winner = None

            if winner is None:
                self._notifications.error(
                    "Generation Failed", f"Failed to generate code for: {file_path}"
                )
                continue

            _provider, response = winner
            files.update(self._parser.parse_code_blocks(response))

        if not files:
            self._notify_no_files()
            return None

        self._notifications.success(
            "Generation Complete", f"Successfully generated {len(files)} files"
        )
        return new_artifact(
            files,
            ", ".join(p.name for p in self._providers),
            GenerationStage.IMPLEMENTATION,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _notify_no_files(self) -> None:
        self._notifications.error(
            "No Files Generated", "The process did not generate any valid files."
        )

    def _has_providers(self) -> bool:
        if self._providers:
            return True
        self._notifications.error(
            "No Providers Available",
            "Add at least one AI provider to generate code.",
        )
        return False

    def _initialize_providers(self) -> None:
        for provider in self._providers:
            provider.initialize()

    def _generate_with_providers(
        self, blueprint: PromptBlueprint, label: str
    ) -> tuple[LLMProviderInterface, str] | None:
        """
        Try each provider once, through its circuit breaker.

        The rendered stage prompt replaces the blueprint context.

        Returns:
            (provider, response) for the first valid response, or None
        """
        rendered = replace(blueprint, context=self._prompts.compose_prompt(blueprint))

        for provider in self._providers:
            breaker = self._breakers.get(provider.name)
            try:
                response = breaker.execute(
                    lambda provider=provider: generate_validated(provider, rendered)
                )
            except Exception as e:
                logger.warning("Provider %s failed for %s: %s", provider.name, label, e)
                continue
            return provider, response

        return None
