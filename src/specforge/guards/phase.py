"""
Validation functions and extractors for GenerationPipeline phases.

validate_code_generation matches the ValidationFunction signature and can be
set as GenerationPhase.validation. The extractors work on the
phase-name -> output map handed to context builders.
"""

import re
from collections.abc import Mapping

from specforge.domain.models import ValidationReport

_COMPONENT_RE = re.compile(
    r"(?:export\s+(?:default\s+)?)?(?:class|function|const)\s+(\w+)"
    r"(?:\s+extends\s+React\.Component|\s*:\s*React\.FC|\s*=\s*\([^)]*\)\s*=>\s*)"
)
_TYPE_RE = re.compile(
    r"(?:export\s+)?(?:type|interface)\s+(\w+)(?:<[^>]*>)?\s*=?\s*(?:\{[^}]*\}|[^;]*);?"
)


def validate_code_generation(content: str) -> ValidationReport:
    """
    Check a phase output for obvious code-generation problems.

    Errors: empty output, unequal brace counts.
    Warnings: no fenced blocks, JSX without React imports.
    """
    if not content.strip():
        return ValidationReport(is_valid=False, errors=("Empty generation result",))

    errors: list[str] = []
    warnings: list[str] = []

    if "```" not in content:
        warnings.append("No code blocks found in response")

    has_react_import = "import React" in content or 'from "react"' in content
    if not has_react_import and "<" in content and ">" in content and "</" in content:
        warnings.append("Found JSX/TSX without proper React imports")

    open_braces = content.count("{")
    close_braces = content.count("}")
    if open_braces != close_braces:
        errors.append(
            f"Unbalanced braces: {open_braces} opening vs {close_braces} closing"
        )

    return ValidationReport(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        coverage_score=0.7 if warnings else 1.0,
    )


def extract_components(results: Mapping[str, str]) -> list[str]:
    """Component names declared across phase outputs, first occurrence order."""
    names: list[str] = []
    for content in results.values():
        names.extend(match.group(1) for match in _COMPONENT_RE.finditer(content))
    return list(dict.fromkeys(names))


def extract_types(results: Mapping[str, str]) -> dict[str, str]:
    """Type/interface name -> declaration text across phase outputs."""
    types: dict[str, str] = {}
    for content in results.values():
        for match in _TYPE_RE.finditer(content):
            types[match.group(1)] = match.group(0)
    return types
