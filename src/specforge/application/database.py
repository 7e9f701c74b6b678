"""
DatabaseGenerationService: schema, client and API-route files for a database.

Providers are tried in order; the first one that returns a valid main schema
response wins and also serves the API-routes request.
"""

import logging
from collections.abc import Sequence

from specforge.application.code_parsing import CodeParsingService
from specforge.application.notification_emitter import NotificationEmitter
from specforge.application.responses import collect_response, generate_validated
from specforge.domain.interfaces import LLMProviderInterface
from specforge.domain.models import GenerationStage, PromptBlueprint

logger = logging.getLogger(__name__)

PRISMA = "prisma"

# Architecture paths owned by database generation.
DATABASE_PATH_MARKERS = ("/db/", "/prisma/")


def is_database_path(path: str) -> bool:
    return any(marker in path for marker in DATABASE_PATH_MARKERS)


def _blueprint(context: str, db_type: str, task: str) -> PromptBlueprint:
    return PromptBlueprint(
        context=context,
        stage=GenerationStage.IMPLEMENTATION,
        constraints={"databaseType": db_type, "task": task},
    )


class DatabaseGenerationService:
    """Generates database files into a caller-owned file map."""

    def __init__(
        self,
        parser: CodeParsingService | None = None,
        notifications: NotificationEmitter | None = None,
    ):
        self._notifications = notifications or NotificationEmitter()
        self._parser = parser or CodeParsingService(self._notifications)

    def generate_database_files(
        self,
        providers: Sequence[LLMProviderInterface],
        schema: str,
        db_type: str,
        target_files: dict[str, str],
    ) -> bool:
        """
        Generate database files and merge them into target_files in place.

        Prisma issues a schema-conversion call followed by a client-setup call;
        other database types issue one generic call. The winning provider then
        generates REST route handlers for the schema.

        Returns:
            True if a provider produced a valid main schema response
        """
        self._notifications.info(
            "Generating Database", "Creating database schema and models..."
        )

        for provider in providers:
            try:
                if db_type == PRISMA:
                    self._generate_prisma(provider, schema, target_files)
                else:
                    response = generate_validated(
                        provider,
                        _blueprint(
                            f"Generate database files for:\n{schema}\n\n"
                            f"Using database type: {db_type}",
                            db_type,
                            "generate_database_files",
                        ),
                    )
                    target_files.update(self._parser.parse_code_blocks(response))
            except Exception as e:
                logger.warning(
                    "Provider %s failed for database generation: %s", provider.name, e
                )
                continue

            self._generate_api_routes(provider, schema, db_type, target_files)
            return True

        self._notifications.error(
            "Database Generation Error", "Failed to generate database files."
        )
        return False

    def _generate_prisma(
        self,
        provider: LLMProviderInterface,
        schema: str,
        target_files: dict[str, str],
    ) -> None:
        response = generate_validated(
            provider,
            _blueprint(
                f"Convert this schema definition to a Prisma schema file:\n{schema}",
                PRISMA,
                "generate_prisma_schema",
            ),
        )
        target_files.update(self._parser.parse_code_blocks(response))

        client_response = collect_response(
            provider,
            _blueprint(
                f"Generate a Prisma client setup file based on this schema:\n{schema}",
                PRISMA,
                "generate_prisma_client",
            ),
        )
        if provider.validate_response(client_response):
            target_files.update(self._parser.parse_code_blocks(client_response))
        else:
            logger.warning("%s returned an invalid Prisma client file", provider.name)

    def _generate_api_routes(
        self,
        provider: LLMProviderInterface,
        schema: str,
        db_type: str,
        target_files: dict[str, str],
    ) -> None:
        try:
            response = generate_validated(
                provider,
                _blueprint(
                    f"Generate RESTful API route handlers for this schema:\n{schema}\n\n"
                    f"Using database type: {db_type}",
                    db_type,
                    "generate_api_routes",
                ),
            )
        except Exception as e:
            logger.warning("Provider %s failed for API routes: %s", provider.name, e)
            return
        target_files.update(self._parser.parse_code_blocks(response))
