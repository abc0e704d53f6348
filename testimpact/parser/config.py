"""Language configuration for the parser.

Maps file extensions to tree-sitter grammars and fixes the candidate
extension order used when resolving extension-less specifiers.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

# File extension -> tree-sitter grammar name
EXTENSION_TO_GRAMMAR: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".jsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# Order matters: when several same-named files exist, the earliest entry wins.
# "" tries the specifier exactly as written.
CANDIDATE_EXTENSIONS: Tuple[str, ...] = (
    "",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".mts",
    ".cts",
    ".json",
)

INDEX_BASENAMES: Tuple[str, ...] = ("index",)


def _suffix(path: str) -> str:
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[-1].lower()


def detect_language(path: str) -> Optional[str]:
    """Detect tree-sitter grammar name from file path.

    Args:
        path: File path (e.g., "src/app.tsx")

    Returns:
        Grammar name (e.g., "tsx") or None if extension is unknown
    """
    return EXTENSION_TO_GRAMMAR.get(_suffix(path))


def is_source_file(path: str) -> bool:
    return _suffix(path) in EXTENSION_TO_GRAMMAR
