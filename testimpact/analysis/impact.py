"""
Impact analysis: which tests does a change set affect?

A test is affected when its own path changed, when any file in its dependency
closure changed, or when a deleted file matches one of its unresolved relative
imports.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..core.models import (
    ChangeSet,
    DependencyClosure,
    ImpactEntry,
    ImpactReason,
    ImpactResult,
)


class ImpactAnalyzer:
    """
    Intersects dependency closures with a change set.

    Usage:
        analyzer = ImpactAnalyzer()
        result = analyzer.analyze(closures, change_set)
        print(result.paths())
    """

    def entry_for(self, closure: DependencyClosure, change_set: ChangeSet) -> Optional[ImpactEntry]:
        """Classify one test; None when it is unaffected."""
        if closure.test_file in change_set:
            return ImpactEntry(closure.test_file, ImpactReason.SELF_CHANGED)

        # BFS order keeps the reported trigger stable across runs
        for path in closure.order:
            if path in change_set:
                return ImpactEntry(closure.test_file, ImpactReason.DEPENDENCY_CHANGED, path)

        if change_set.deleted and closure.dangling:
            for path in change_set.paths:
                if path in change_set.deleted and path in closure.dangling:
                    return ImpactEntry(closure.test_file, ImpactReason.DEPENDENCY_DELETED, path)
        return None

    def analyze(
        self,
        closures: Sequence[DependencyClosure],
        change_set: ChangeSet,
        diagnostics: Iterable[tuple[str, str]] = (),
    ) -> ImpactResult:
        """Build the ImpactResult, keeping the order of `closures`."""
        entries: List[ImpactEntry] = []
        if change_set:
            for closure in closures:
                entry = self.entry_for(closure, change_set)
                if entry is not None:
                    entries.append(entry)
        return ImpactResult(
            entries=tuple(entries),
            tests_considered=len(closures),
            diagnostics=tuple(diagnostics),
        )
