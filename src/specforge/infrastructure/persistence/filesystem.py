"""
Filesystem storage for generated artifacts.

Writes every file of a CodeArtifact under an output directory, plus an
artifact.json manifest describing the run, and reads such a directory
back so a later run can build on it.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from specforge.domain.exceptions import ConfigurationError, UnsafePathError
from specforge.domain.models import ArtifactMetadata, CodeArtifact, GenerationStage

logger = logging.getLogger(__name__)

MANIFEST_NAME = "artifact.json"
MANIFEST_TEMP_NAME = "artifact.tmp"


def artifact_to_dict(artifact: CodeArtifact) -> dict[str, Any]:
    """Serialize artifact metadata and file list to a JSON-compatible dict."""
    return {
        "generated_at": artifact.metadata.generated_at.isoformat(),
        "provider_used": artifact.metadata.provider_used,
        "stage": str(artifact.metadata.stage),
        "files": sorted(artifact.files),
    }


def _dict_to_metadata(data: dict[str, Any]) -> ArtifactMetadata:
    return ArtifactMetadata(
        generated_at=datetime.fromisoformat(data["generated_at"]),
        provider_used=data["provider_used"],
        stage=GenerationStage(data["stage"]),
    )


class ArtifactWriter:
    """Writes artifacts to a directory tree and reads them back."""

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def resolve(self, relative_path: str) -> Path:
        """
        Map an artifact key to a path under base_dir.

        Raises:
            UnsafePathError: If the key is absolute, escapes base_dir, or
                lands on the manifest
        """
        base = self._base_dir.resolve()
        target = (base / relative_path).resolve()
        if Path(relative_path).is_absolute() or not target.is_relative_to(base):
            raise UnsafePathError(relative_path)
        if target in (base / MANIFEST_NAME, base / MANIFEST_TEMP_NAME):
            raise UnsafePathError(relative_path, "over the artifact manifest")
        return target

    def write(self, artifact: CodeArtifact) -> list[Path]:
        """
        Write every file and the manifest.

        Returns:
            Paths of the written source files, in artifact order
        """
        # Validate all keys before touching the filesystem
        targets = [
            (self.resolve(path), content) for path, content in artifact.files.items()
        ]

        written: list[Path] = []
        for target, content in targets:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            written.append(target)

        self._write_manifest(artifact)
        logger.info("Wrote %d file(s) to %s", len(written), self._base_dir)
        return written

    def read(self) -> CodeArtifact:
        """
        Load the artifact previously written to base_dir.

        Only files listed in the manifest are read.

        Raises:
            ConfigurationError: If the manifest or a listed file is missing
                or unreadable
        """
        manifest_path = self._base_dir / MANIFEST_NAME
        try:
            with open(manifest_path, encoding="utf-8") as f:
                data = json.load(f)
            metadata = _dict_to_metadata(data)
            files = {
                path: self.resolve(path).read_text(encoding="utf-8")
                for path in data["files"]
            }
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(
                f"No readable artifact in {self._base_dir}: {e}"
            ) from e

        logger.debug("Loaded %d file(s) from %s", len(files), self._base_dir)
        return CodeArtifact(files=files, metadata=metadata)

    def _write_manifest(self, artifact: CodeArtifact) -> None:
        """Atomically write artifact.json using write-to-temp + rename."""
        manifest_path = self._base_dir / MANIFEST_NAME
        temp_path = self._base_dir / MANIFEST_TEMP_NAME
        self._base_dir.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(artifact_to_dict(artifact), f, indent=2)
        temp_path.replace(manifest_path)
