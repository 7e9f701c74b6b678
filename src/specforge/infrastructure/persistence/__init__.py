"""
Persistence adapters for generated artifacts.
"""

from specforge.infrastructure.persistence.filesystem import (
    ArtifactWriter,
    artifact_to_dict,
)

__all__ = [
    "ArtifactWriter",
    "artifact_to_dict",
]
