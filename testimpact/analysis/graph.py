"""Dependency graph builder.

Computes, per test file, the set of project files it transitively imports.
Each test is an independent unit of work: closures are computed in a thread
pool, every worker keeps its own arena of visited files, and results land in
a slot indexed by the test's position.
"""

from __future__ import annotations

import os
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from ..core.models import DependencyClosure, SourceFile
from ..observability import get_logger
from ..parser.config import is_source_file
from .extractor import Extractor, ImportExtractor
from .resolver import ModuleResolver, is_path_specifier

logger = get_logger(__name__)


def default_workers() -> int:
    return max(1, min(32, os.cpu_count() or 1))


class DependencyGraphBuilder:
    """
    Breadth-first reachability over import edges.

    Usage:
        builder = DependencyGraphBuilder(root)
        closure = builder.closure_for("src/__tests__/app.test.ts")
        closures = builder.build_all(test_files, workers=8)
    """

    def __init__(
        self,
        root: str | Path,
        extractor: Optional[Extractor] = None,
        resolver: Optional[ModuleResolver] = None,
    ):
        self.root = Path(root).absolute()
        self.extractor = extractor if extractor is not None else ImportExtractor()
        self.resolver = resolver if resolver is not None else ModuleResolver(self.root)

    def _specifiers(self, source: SourceFile, problems: Dict[str, str]) -> Tuple[str, ...]:
        if source.specifiers is not None:
            return source.specifiers
        if not is_source_file(source.path):
            # assets, json and other leaves have no outgoing edges
            source.specifiers = ()
            return source.specifiers

        try:
            text = source.read_text()
        except UnicodeDecodeError:
            problems.setdefault(source.path, "decode")
            source.specifiers = ()
            return source.specifiers
        except OSError as e:
            problems.setdefault(source.path, f"read: {e.strerror or e}")
            source.specifiers = ()
            return source.specifiers

        extraction = self.extractor.extract(text, source.path)
        if extraction.problem:
            problems.setdefault(source.path, extraction.problem)
        source.specifiers = extraction.specifiers
        return source.specifiers

    def closure_for(self, test_file: str) -> DependencyClosure:
        """Compute the transitive dependency closure of one test file.

        The visited set is seeded with the test itself, so the test is never part
        of its own closure and cycles terminate.
        """
        arena: Dict[str, SourceFile] = {}
        problems: Dict[str, str] = {}
        visited: Set[str] = {test_file}
        order: List[str] = []
        dangling: Set[str] = set()
        queue: Deque[str] = deque([test_file])

        while queue:
            current = queue.popleft()
            source = arena.get(current)
            if source is None:
                source = SourceFile(path=current, abs_path=self.root / current)
                arena[current] = source

            for spec in self._specifiers(source, problems):
                resolved = self.resolver.resolve(spec, source.directory)
                if resolved is None:
                    if is_path_specifier(spec):
                        dangling.update(self.resolver.candidates(spec, source.directory))
                    continue
                if resolved in visited:
                    continue
                visited.add(resolved)
                order.append(resolved)
                queue.append(resolved)

        for path, reason in problems.items():
            logger.debug("source_skipped", path=path, reason=reason, test_file=test_file)

        return DependencyClosure(
            test_file=test_file,
            files=frozenset(order),
            order=tuple(order),
            dangling=frozenset(dangling),
            problems=tuple(sorted(problems.items())),
        )

    def _safe_closure(self, test_file: str) -> DependencyClosure:
        try:
            return self.closure_for(test_file)
        except Exception as e:  # errors stay in this test's slot
            logger.error("closure_failed", test_file=test_file, error=str(e), exc_info=True)
            return DependencyClosure(test_file=test_file, error=f"{type(e).__name__}: {e}")

    def build_all(self, test_files: Sequence[str], workers: Optional[int] = None) -> List[DependencyClosure]:
        """Compute closures for every test file, preserving input order."""
        if not test_files:
            return []
        n_workers = workers if workers and workers > 0 else default_workers()
        n_workers = min(n_workers, len(test_files))

        slots: List[Optional[DependencyClosure]] = [None] * len(test_files)
        if n_workers == 1:
            for i, test_file in enumerate(test_files):
                slots[i] = self._safe_closure(test_file)
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as pool:
                futures = {pool.submit(self._safe_closure, t): i for i, t in enumerate(test_files)}
                for fut, i in futures.items():
                    slots[i] = fut.result()

        logger.debug("closures_built", tests=len(test_files), workers=n_workers)
        return [c for c in slots if c is not None]
