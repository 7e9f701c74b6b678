"""
Generation ordering and coherence context for architecture-driven generation.

Dependency-light files (config, types) are generated before dependency-heavy
files (pages) so that later prompts can reference earlier outputs.
"""

import re
from collections.abc import Iterable, Mapping

NO_FILES_CONTEXT = "No files generated yet."
MAX_CONTEXT_FILES = 5

# "├─", "└─" (with any run of extra dashes) and "│".
_TREE_GLYPHS_RE = re.compile(r"[├└]─+|│\s*")


def clean_path(line: str) -> str:
    """Strip tree-drawing glyphs and surrounding whitespace from a listing line."""
    return _TREE_GLYPHS_RE.sub("", line).strip()


def _directory(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def is_type_definition(path: str) -> bool:
    return "types.ts" in path or ".d.ts" in path


def is_config(path: str) -> bool:
    return "/config/" in path or path.endswith(".config.ts")


def is_shared_module(path: str) -> bool:
    """Utility, lib or hook file."""
    return "/utils/" in path or "/lib/" in path or "/hooks/" in path


class FileOrganizationService:
    """Orders architecture file paths and builds previously-generated context."""

    def organize_file_paths_by_hierarchy(self, lines: Iterable[str]) -> list[str]:
        """
        Bucket cleaned paths and concatenate buckets in generation order:
        config, types, utils/lib, hooks, components, pages, other.

        Order within a bucket is input order.
        """
        config: list[str] = []
        types: list[str] = []
        utilities: list[str] = []
        hooks: list[str] = []
        components: list[str] = []
        pages: list[str] = []
        other: list[str] = []

        for line in lines:
            path = clean_path(line)
            if is_config(path):
                config.append(path)
            elif is_type_definition(path):
                types.append(path)
            elif "/utils/" in path or "/lib/" in path:
                utilities.append(path)
            elif "/hooks/" in path:
                hooks.append(path)
            elif "/components/" in path:
                components.append(path)
            elif "/pages/" in path:
                pages.append(path)
            else:
                other.append(path)

        return [*config, *types, *utilities, *hooks, *components, *pages, *other]

    def create_files_context(
        self, files: Mapping[str, str], current_file_path: str
    ) -> str:
        """
        Render up to five already-generated files relevant to the next file.

        Priority: type definitions, files in the same directory, then
        utils/lib/hooks files. Duplicates keep their first position.
        """
        if not files:
            return NO_FILES_CONTEXT

        current_dir = _directory(current_file_path)
        type_files = [p for p in files if is_type_definition(p)]
        same_dir_files = [p for p in files if _directory(p) == current_dir]
        shared_files = [p for p in files if is_shared_module(p)]

        unique = list(dict.fromkeys([*type_files, *same_dir_files, *shared_files]))
        selected = unique[:MAX_CONTEXT_FILES]

        parts = [f"Previously generated files ({len(selected)}/{len(files)} shown):\n\n"]
        for path in selected:
            parts.append(f"File: {path}\n```typescript\n{files[path]}\n```\n\n")
        return "".join(parts)
