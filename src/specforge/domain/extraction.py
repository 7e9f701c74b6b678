"""
File extraction from freeform LLM text.

Implements:
- scan_fenced_blocks: stateless scanner over ``` fenced blocks
- Tier functions, tried in order by CodeParsingService:
    1. extract_annotated_blocks  (```lang:path, ```path, ```lang, ```)
    2. extract_any_blocks        (any fenced block -> file{n}.txt)
    3. extract_marker_sections   (bare "name.ext:" marker lines)
- FALLBACK_FILENAME for the whole-response fallback

Every function is pure: identical input text yields an identical file map.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FALLBACK_FILENAME = "main.txt"
ERROR_FILENAME = "response.txt"

LANGUAGE_EXTENSIONS: dict[str, str] = {
    "typescript": "ts",
    "ts": "ts",
    "javascript": "js",
    "js": "js",
    "jsx": "jsx",
    "tsx": "tsx",
    "json": "json",
    "html": "html",
    "css": "css",
    "markdown": "md",
    "md": "md",
}

# Opening fence with its info string, then a lazy body up to the next fence.
_FENCE_RE = re.compile(r"```([^\n`]*)\n(.*?)```", re.DOTALL)

_PATH = r"[\w\-./]+"
_LANG_COLON_PATH_RE = re.compile(rf"^(\w+):({_PATH})$")
_LANG_SPACE_PATH_RE = re.compile(rf"^(\w+)[ \t]+({_PATH}\.\w+)$")
_BARE_TOKEN_RE = re.compile(rf"^{_PATH}$")

_MARKER_RE = re.compile(r"^[\w\-.]+\.(js|ts|jsx|tsx|json|md|html|css):\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class FencedBlock:
    """A fenced code block found in a response."""

    info: str  # Raw info string after the opening fence, stripped
    body: str  # Block content, stripped


@dataclass(frozen=True)
class BlockAnnotation:
    """Language and/or filename parsed from a fence info string."""

    language: str = ""
    filename: str | None = None


def scan_fenced_blocks(text: str) -> list[FencedBlock]:
    """Return every fenced block in encounter order."""
    return [
        FencedBlock(info=match.group(1).strip(), body=match.group(2).strip())
        for match in _FENCE_RE.finditer(text)
    ]


def parse_annotation(info: str) -> BlockAnnotation | None:
    """
    Parse a fence info string.

    Accepted forms: "lang:path", "lang path.ext", "path.ext", "lang", "".
    A bare token is a filename only when it contains a dot.

    Returns:
        The annotation, or None if the info string is not in an accepted form
    """
    if not info:
        return BlockAnnotation()

    match = _LANG_COLON_PATH_RE.match(info) or _LANG_SPACE_PATH_RE.match(info)
    if match:
        return BlockAnnotation(language=match.group(1), filename=match.group(2))

    if _BARE_TOKEN_RE.match(info):
        if "." in info:
            return BlockAnnotation(filename=info)
        return BlockAnnotation(language=info)

    return None


def synthesize_filename(language: str, counter: int) -> str:
    """Name for an unnamed block, e.g. file1.ts; unknown languages map to .txt."""
    extension = LANGUAGE_EXTENSIONS.get(language.lower(), "txt")
    return f"file{counter}.{extension}"


def extract_annotated_blocks(text: str) -> dict[str, str]:
    """
    Tier 1: blocks with an accepted info string.

    If any block names a file, only named blocks are kept. Otherwise every
    block is named file{n}.<ext>, n counting blocks in encounter order.
    """
    annotated = [
        (annotation, block)
        for block in scan_fenced_blocks(text)
        if (annotation := parse_annotation(block.info)) is not None
    ]

    files: dict[str, str] = {}
    named = [(a, b) for a, b in annotated if a.filename]
    if named:
        for annotation, block in named:
            files[annotation.filename] = block.body  # type: ignore[index]
        return files

    for counter, (annotation, block) in enumerate(annotated, start=1):
        files[synthesize_filename(annotation.language, counter)] = block.body
    return files


def extract_any_blocks(text: str) -> dict[str, str]:
    """Tier 2: every fenced block regardless of info string, as file{n}.txt."""
    return {
        f"file{counter}.txt": block.body
        for counter, block in enumerate(scan_fenced_blocks(text), start=1)
    }


def extract_marker_sections(text: str) -> dict[str, str]:
    """
    Tier 3: sections introduced by a bare "name.ext:" line.

    Lines up to the next marker belong to the current file. Markers with no
    following lines produce no file.
    """
    files: dict[str, str] = {}
    current_name: str | None = None
    current_lines: list[str] = []

    for line in text.split("\n"):
        stripped = line.strip()
        if _MARKER_RE.match(stripped):
            if current_name and current_lines:
                files[current_name] = "\n".join(current_lines)
            current_name = stripped.split(":")[0]
            current_lines = []
        elif current_name:
            current_lines.append(line)

    if current_name and current_lines:
        files[current_name] = "\n".join(current_lines)

    return files


EXTRACTION_TIERS = (
    extract_annotated_blocks,
    extract_any_blocks,
    extract_marker_sections,
)
