"""Import extraction: source text -> module specifiers.

Never touches the filesystem and never raises for bad input; a file that
cannot be parsed yields no specifiers plus a problem description.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from ..core.cache import SpecifierCache, content_digest
from ..parser.treesitter import import_specs_from_parsed, parse_source


@dataclass(frozen=True)
class Extraction:
    specifiers: Tuple[str, ...] = ()
    problem: Optional[str] = None


class Extractor(Protocol):
    def extract(self, text: str, path: str) -> Extraction: ...


class ImportExtractor:
    """Tree-sitter based extractor for the JavaScript/TypeScript family."""

    def extract(self, text: str, path: str) -> Extraction:
        """Extract specifiers from `text`.

        Args:
            text: Full source text
            path: File path, only used to pick the grammar
        """
        try:
            parsed = parse_source(text, file_path=path)
            if parsed is None:
                return Extraction()
            if parsed.has_error:
                return Extraction(problem="syntax")
            return Extraction(specifiers=tuple(import_specs_from_parsed(parsed)))
        except Exception as e:  # grammar loading or parser failure must stay per-file
            return Extraction(problem=f"parse: {e}")


class CachingExtractor:
    """Wraps an extractor with the persistent content-hash cache."""

    def __init__(self, inner: Extractor, cache: SpecifierCache):
        self.inner = inner
        self.cache = cache

    def extract(self, text: str, path: str) -> Extraction:
        digest = content_digest(text)
        cached = self.cache.get(path, digest)
        if cached is not None:
            return Extraction(specifiers=cached)

        result = self.inner.extract(text, path)
        if result.problem is None:
            self.cache.put(path, digest, result.specifiers)
        return result
