"""
TestImpactResolver: the main interface.

Wires discovery, closure building, change-set normalization and impact
analysis for one run. Nothing is kept between runs except the optional
specifier cache.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from .analysis.changeset import ChangeSetNormalizer
from .analysis.discovery import TestDiscovery
from .analysis.extractor import CachingExtractor, Extractor, ImportExtractor
from .analysis.graph import DependencyGraphBuilder
from .analysis.impact import ImpactAnalyzer
from .analysis.resolver import ModuleResolver
from .config import ResolverConfig, load_config
from .core.cache import SpecifierCache
from .core.models import ChangeSet, DependencyClosure, Diagnostics, ImpactResult
from .errors import ProjectRootError
from .observability import get_logger

logger = get_logger(__name__)


class TestImpactResolver:
    """
    Usage:
        resolver = TestImpactResolver("/path/to/repo")
        result = resolver.affected_from_text(git_diff_name_only_output)
        for entry in result:
            print(entry.test_file, entry.reason.value)
    """

    __test__ = False

    def __init__(
        self,
        root: str | Path,
        config: Optional[ResolverConfig] = None,
        *,
        use_cache: Optional[bool] = None,
        workers: Optional[int] = None,
    ):
        root_path = Path(root).absolute()
        if not root_path.is_dir():
            raise ProjectRootError(f"project root is not a directory: {root_path}")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise ProjectRootError(f"project root is not readable: {root_path}")
        self.root = root_path
        self.config = config if config is not None else load_config(self.root)
        self.workers = workers if workers is not None else self.config.workers
        self.diagnostics = Diagnostics()

        enable_cache = self.config.cache if use_cache is None else use_cache
        self.cache: Optional[SpecifierCache] = None
        extractor: Extractor = ImportExtractor()
        if enable_cache:
            self.cache = SpecifierCache(self.config.resolve_cache_dir(self.root)).load()
            extractor = CachingExtractor(extractor, self.cache)

        self.discovery = TestDiscovery(
            self.root,
            test_suffixes=self.config.test_suffixes,
            test_dirs=self.config.test_dirs,
            exclude_dirs=self.config.exclude_dirs,
        )
        self.resolver = ModuleResolver(self.root, extensions=self.config.extensions)
        self.builder = DependencyGraphBuilder(self.root, extractor=extractor, resolver=self.resolver)
        self.normalizer = ChangeSetNormalizer(self.root)
        self.analyzer = ImpactAnalyzer()

    # === Building blocks ===

    def test_files(self) -> List[str]:
        """Discovered test files, sorted."""
        return self.discovery.discover(self.diagnostics)

    def closure_of(self, test_file: str) -> DependencyClosure:
        """Dependency closure of a single test (absolute or root-relative path)."""
        rel = self.normalizer.normalize_path(test_file)
        closure = self.builder.closure_for(rel)
        self._record(closure)
        # one closure visits only part of the tree, keep other entries
        self._flush_cache(prune=False)
        return closure

    def closures(self, test_files: Optional[List[str]] = None) -> List[DependencyClosure]:
        """Closures of the given tests, or of every discovered test."""
        if test_files is None:
            return self._build(self.test_files(), prune=True)
        return self._build(test_files, prune=False)

    def change_set(self, changed: Iterable[str]) -> ChangeSet:
        return self.normalizer.change_set(changed)

    # === Primary query interface ===

    def affected(self, changed: Iterable[str]) -> ImpactResult:
        """Tests affected by the given changed paths.

        Raises:
            ChangeSetError: a changed path is malformed or outside the root
            ProjectRootError: the root cannot be walked
        """
        change_set = self.change_set(changed)
        test_files = self.test_files()
        if not change_set:
            logger.info("no_changes", tests=len(test_files))
            return ImpactResult(tests_considered=len(test_files), diagnostics=self._diagnostic_items())

        closures = self._build(test_files, prune=True)
        result = self.analyzer.analyze(closures, change_set, self._diagnostic_items())
        logger.info(
            "impact_resolved",
            changed=len(change_set),
            tests=len(test_files),
            affected=len(result),
            problems=len(self.diagnostics),
        )
        return result

    def affected_from_text(self, text: str) -> ImpactResult:
        """Same as `affected` for newline-delimited diff output."""
        return self.affected(text.splitlines())

    # === Internals ===

    def _record(self, closure: DependencyClosure) -> None:
        for path, reason in closure.problems:
            if path not in self.diagnostics.problems:
                logger.warning("source_skipped", path=path, reason=reason)
        self.diagnostics.merge(closure.problems)
        if closure.error:
            self.diagnostics.add(closure.test_file, f"closure failed: {closure.error}")

    def _build(self, test_files: List[str], prune: bool) -> List[DependencyClosure]:
        closures = self.builder.build_all(test_files, workers=self.workers)
        for closure in closures:
            self._record(closure)
        self._flush_cache(prune=prune)
        return closures

    def _diagnostic_items(self):
        return tuple(self.diagnostics.problems.items())

    def _flush_cache(self, prune: bool = True) -> None:
        if self.cache is not None:
            self.cache.save(prune=prune)
