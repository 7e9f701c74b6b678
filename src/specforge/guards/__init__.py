"""
Checks applied to generated output.

Organization by validation profile:
- static: per-file shallow checks (brackets, semicolons, JSON)
- phase: ValidationFunctions and extractors for pipeline phases
"""

from specforge.guards.phase import (
    extract_components,
    extract_types,
    validate_code_generation,
)
from specforge.guards.static import (
    has_balanced_brackets,
    has_inconsistent_semicolons,
    is_valid_json,
    strip_literals_and_comments,
)

__all__ = [
    # Static checks
    "has_balanced_brackets",
    "has_inconsistent_semicolons",
    "is_valid_json",
    "strip_literals_and_comments",
    # Phase validation
    "validate_code_generation",
    "extract_components",
    "extract_types",
]
