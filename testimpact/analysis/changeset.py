"""Change set normalization.

Converts the raw changed-file list (newline-delimited, relative to the project
root, as produced by a VCS diff) to the canonical root-relative posix form
used by the graph. Normalization is idempotent.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from ..core.models import ChangeSet
from ..core.paths import relative_to_root
from ..errors import ChangeSetError


class ChangeSetNormalizer:
    """
    Usage:
        normalizer = ChangeSetNormalizer(root)
        change_set = normalizer.parse(diff_output)
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).absolute()

    def normalize_path(self, raw: str) -> str:
        """Canonicalize one changed path.

        Raises:
            ChangeSetError: path contains NUL, is empty, or escapes the root
        """
        if "\0" in raw:
            raise ChangeSetError(f"changed path contains a NUL byte: {raw!r}")
        cleaned = raw.strip().replace("\\", "/")
        if not cleaned:
            raise ChangeSetError("changed path is empty")

        rel = relative_to_root(self.root, cleaned)
        if rel is None:
            raise ChangeSetError(f"changed path is outside the project root: {raw}")
        if not rel:
            raise ChangeSetError(f"changed path names the project root itself: {raw}")
        return rel

    def normalize(self, raw_paths: Iterable[str]) -> List[str]:
        """Normalize many paths, skipping blanks and dropping duplicates (order kept)."""
        out: List[str] = []
        seen = set()
        for raw in raw_paths:
            if not raw.strip():
                continue
            path = self.normalize_path(raw)
            if path not in seen:
                seen.add(path)
                out.append(path)
        return out

    def change_set(self, raw_paths: Iterable[str]) -> ChangeSet:
        paths = self.normalize(raw_paths)
        deleted = frozenset(p for p in paths if not os.path.lexists(self.root / p))
        return ChangeSet(paths=tuple(paths), deleted=deleted)

    def parse(self, text: str) -> ChangeSet:
        """Build a ChangeSet from newline-delimited diff output."""
        return self.change_set(text.splitlines())
