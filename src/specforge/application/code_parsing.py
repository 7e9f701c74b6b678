"""
CodeParsingService: file maps from LLM text, plus shallow validation.

Parsing tries the extraction tiers in order and stops at the first tier
that yields at least one file. Validation never aborts generation; callers
log the findings and carry on.
"""

import logging
from collections.abc import Mapping

from specforge.application.notification_emitter import NotificationEmitter
from specforge.domain.extraction import (
    ERROR_FILENAME,
    EXTRACTION_TIERS,
    FALLBACK_FILENAME,
)
from specforge.domain.models import ValidationReport
from specforge.guards.static import (
    JSON_EXTENSION_RE,
    SCRIPT_EXTENSIONS_RE,
    has_balanced_brackets,
    has_inconsistent_semicolons,
    is_valid_json,
)

logger = logging.getLogger(__name__)


class CodeParsingService:
    """Extracts and checks generated files."""

    def __init__(self, notifications: NotificationEmitter | None = None):
        self._notifications = notifications or NotificationEmitter()

    def parse_code_blocks(self, response: str) -> dict[str, str]:
        """
        Extract a filename -> content map from a raw response.

        Falls back to the whole response under main.txt when no tier
        matches, and under response.txt if extraction itself fails.
        """
        try:
            for tier in EXTRACTION_TIERS:
                files = tier(response)
                if files:
                    logger.debug(
                        "Extracted %d file(s) with %s", len(files), tier.__name__
                    )
                    return files
        except Exception:
            logger.exception("Error parsing code blocks")
            self._notifications.error(
                "Parsing Error", "Failed to parse code blocks from the response."
            )
            return {ERROR_FILENAME: response}

        return {FALLBACK_FILENAME: response}

    def validate_code(self, files: Mapping[str, str]) -> ValidationReport:
        """
        Shallow per-file checks.

        Errors: no files, empty content, unbalanced brackets in JS/TS,
        invalid JSON. Inconsistent semicolon usage is reported as a warning.
        """
        if not files:
            return ValidationReport(
                is_valid=False,
                errors=("No code files were extracted from the response.",),
            )

        errors: list[str] = []
        warnings: list[str] = []

        for filename, content in files.items():
            if not content.strip():
                errors.append(f"{filename} has empty content.")
                continue

            if SCRIPT_EXTENSIONS_RE.search(filename):
                if not has_balanced_brackets(content):
                    errors.append(
                        f"{filename} has unbalanced brackets or parentheses."
                    )
                if has_inconsistent_semicolons(content):
                    warnings.append(f"{filename} has inconsistent semicolon usage.")

            if JSON_EXTENSION_RE.search(filename) and not is_valid_json(content):
                errors.append(f"{filename} contains invalid JSON.")

        return ValidationReport(
            is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings)
        )
