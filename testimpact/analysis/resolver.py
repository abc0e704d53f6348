"""Module resolution: specifier -> file inside the project root.

Policy:
1. Bare specifiers (packages) are never resolved.
2. `<spec><ext>` for each candidate extension, in order.
3. `<spec>/index<ext>` for each candidate extension, in order.
4. Otherwise unresolved.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.models import UNRESOLVED
from ..core.paths import join_within_root, relative_to_root
from ..parser.config import CANDIDATE_EXTENSIONS, INDEX_BASENAMES


def is_path_specifier(specifier: str) -> bool:
    """True for `./x`, `../x`, `/x`, `.` and `..`."""
    return specifier in (".", "..") or specifier.startswith(("./", "../", "/"))


def _strip_query(specifier: str) -> str:
    for marker in ("?", "#"):
        idx = specifier.find(marker)
        if idx > 0:
            specifier = specifier[:idx]
    return specifier


class ModuleResolver:
    """Resolves specifiers against the filesystem under `root`.

    Results are root-relative posix paths, or None when unresolved.
    """

    def __init__(
        self,
        root: str | Path,
        extensions: Sequence[str] = CANDIDATE_EXTENSIONS,
        index_basenames: Sequence[str] = INDEX_BASENAMES,
    ):
        self.root = Path(root).absolute()
        self.real_root = self.root.resolve()
        self.extensions = tuple(extensions)
        self.index_basenames = tuple(index_basenames)

    def _base_path(self, specifier: str, from_dir: str) -> Optional[str]:
        if not is_path_specifier(specifier):
            return None
        spec = _strip_query(specifier)

        rel_dir = from_dir
        if os.path.isabs(from_dir):
            rel_dir = relative_to_root(self.root, from_dir)
            if rel_dir is None:
                return None

        if spec.startswith("/"):
            # Filesystem paths under the root are taken as-is, anything else is root-anchored
            inside = relative_to_root(self.root, spec)
            if inside is not None:
                return inside
            return join_within_root("", spec.lstrip("/"))
        return join_within_root(rel_dir, spec)

    def candidates(self, specifier: str, from_dir: str) -> List[str]:
        """Ordered root-relative paths tried for `specifier`.

        Empty for bare specifiers and for paths escaping the root.
        """
        base = self._base_path(specifier, from_dir)
        if base is None:
            return []

        out: List[str] = []
        if base:
            out.extend(base + ext for ext in self.extensions)
        for name in self.index_basenames:
            stem = f"{base}/{name}" if base else name
            out.extend(stem + ext for ext in self.extensions)
        return out

    def resolve(self, specifier: str, from_dir: str) -> Optional[str]:
        """Resolve `specifier` referenced from directory `from_dir`.

        Args:
            specifier: Module specifier exactly as written
            from_dir: Directory of the referencing file, absolute or root-relative
        """
        for candidate in self.candidates(specifier, from_dir):
            if self._is_project_file(self.root / candidate):
                return candidate
        return UNRESOLVED

    def _is_project_file(self, path: Path) -> bool:
        if not path.is_file():
            return False
        # symlinks may point outside the root
        return path.resolve().is_relative_to(self.real_root)
