"""
Shallow static checks for generated files.

Pure checks with no I/O. These are best-effort heuristics, not parsers:
they catch truncated or obviously malformed output.
"""

import json
import re

SCRIPT_EXTENSIONS_RE = re.compile(r"\.(js|ts|jsx|tsx)$")
JSON_EXTENSION_RE = re.compile(r"\.json$")

_BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
_CLOSING = set(_BRACKET_PAIRS.values())

# Applied in order: string literals first, then comments.
_STRIP_PATTERNS = (
    re.compile(r'"(?:\\.|[^"\\])*"'),
    re.compile(r"'(?:\\.|[^'\\])*'"),
    re.compile(r"`(?:\\.|[^`\\])*`"),
    re.compile(r"//.*$", re.MULTILINE),
    re.compile(r"/\*.*?\*/", re.DOTALL),
)


def strip_literals_and_comments(code: str) -> str:
    """Remove string/template literals and comments from JS/TS source."""
    for pattern in _STRIP_PATTERNS:
        code = pattern.sub("", code)
    return code


def has_balanced_brackets(code: str) -> bool:
    """
    Check (), [] and {} balance outside literals and comments.

    Unmatched closers and unclosed openers both count as unbalanced.
    """
    stack: list[str] = []
    for char in strip_literals_and_comments(code):
        if char in _BRACKET_PAIRS:
            stack.append(char)
        elif char in _CLOSING:
            if not stack or _BRACKET_PAIRS[stack.pop()] != char:
                return False
    return not stack


def has_inconsistent_semicolons(code: str) -> bool:
    """
    True if the code uses semicolons but some statement line lacks one.

    Comment lines and lines ending in a brace are exempt.
    """
    if ";" not in code:
        return False
    for line in code.split("\n"):
        stripped = line.strip()
        if (
            stripped
            and not stripped.startswith("//")
            and ";" not in line
            and not stripped.endswith("{")
            and not stripped.endswith("}")
        ):
            return True
    return False


def is_valid_json(content: str) -> bool:
    try:
        json.loads(content)
    except json.JSONDecodeError:
        return False
    return True
