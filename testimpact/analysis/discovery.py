"""Test file discovery.

Walks the project with pruning so excluded directories are never entered.
Output is sorted so repeated runs on the same tree agree byte for byte.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.models import Diagnostics
from ..errors import ProjectRootError
from ..observability import get_logger
from ..parser.config import is_source_file

logger = get_logger(__name__)

DEFAULT_TEST_SUFFIXES: tuple[str, ...] = (".test", ".spec")
DEFAULT_TEST_DIRS: tuple[str, ...] = ("__tests__",)
DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    "dist",
    "build",
    "out",
    "coverage",
    ".next",
    ".nuxt",
    ".turbo",
    ".cache",
    ".venv",
    "venv",
    "__pycache__",
    ".testimpact",
)


def is_test_file(
    rel_path: str,
    test_suffixes: Iterable[str] = DEFAULT_TEST_SUFFIXES,
    test_dirs: Iterable[str] = DEFAULT_TEST_DIRS,
) -> bool:
    """Check a root-relative path against the test naming conventions.

    - suffix convention: `foo.test.ts`, `foo.spec.jsx`
    - directory convention: any file below a `__tests__` directory
    """
    if not is_source_file(rel_path):
        return False
    parts = rel_path.split("/")
    stem = parts[-1].rsplit(".", 1)[0]
    if any(stem.endswith(suffix) for suffix in test_suffixes):
        return True
    dirs = set(test_dirs)
    return any(part in dirs for part in parts[:-1])


class TestDiscovery:
    """Finds test files under a project root."""

    __test__ = False

    def __init__(
        self,
        root: str | Path,
        test_suffixes: Iterable[str] = DEFAULT_TEST_SUFFIXES,
        test_dirs: Iterable[str] = DEFAULT_TEST_DIRS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
    ):
        self.root = Path(root).absolute()
        self.test_suffixes = tuple(test_suffixes)
        self.test_dirs = tuple(test_dirs)
        self.exclude_dirs = frozenset(exclude_dirs)

    def discover(self, diagnostics: Optional[Diagnostics] = None) -> List[str]:
        """Return root-relative test file paths, sorted lexicographically.

        Raises:
            ProjectRootError: root is missing or cannot be listed
        """
        if diagnostics is None:
            diagnostics = Diagnostics()
        if not self.root.is_dir():
            raise ProjectRootError(f"project root is not a directory: {self.root}")
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise ProjectRootError(f"project root is not readable: {self.root}")

        def on_error(err: OSError) -> None:
            target = getattr(err, "filename", None) or ""
            if os.path.normpath(str(target)) == os.path.normpath(str(self.root)):
                raise ProjectRootError(f"cannot list project root {self.root}: {err.strerror}") from err
            rel = self._rel(target)
            diagnostics.add(rel, "unreadable directory")
            logger.warning("directory_unreadable", path=rel, error=err.strerror)

        found: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root, topdown=True, onerror=on_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            rel_dir = self._rel(dirpath)
            for name in sorted(filenames):
                rel = f"{rel_dir}/{name}" if rel_dir else name
                if is_test_file(rel, self.test_suffixes, self.test_dirs):
                    found.append(rel)

        found.sort()
        logger.debug("tests_discovered", root=str(self.root), count=len(found))
        return found

    def _rel(self, path: str | os.PathLike) -> str:
        rel = os.path.relpath(str(path), str(self.root)).replace("\\", "/")
        return "" if rel == "." else rel
