from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .paths import parent_dir

# Resolution result for a specifier that maps to no file inside the project.
UNRESOLVED = None


class ImpactReason(str, Enum):
    """Why a test file was selected."""

    SELF_CHANGED = "self-changed"
    DEPENDENCY_CHANGED = "dependency-changed"
    DEPENDENCY_DELETED = "dependency-deleted"


@dataclass
class SourceFile:
    """One file visited by the traversal.

    Text is read on demand and dropped once specifiers are extracted.
    """

    path: str  # root-relative posix
    abs_path: Path
    specifiers: Optional[Tuple[str, ...]] = None

    @property
    def directory(self) -> str:
        return parent_dir(self.path)

    def read_text(self) -> str:
        return self.abs_path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class DependencyClosure:
    """Files transitively imported by one test file (never the test itself)."""

    test_file: str
    files: FrozenSet[str] = frozenset()
    order: Tuple[str, ...] = ()  # BFS discovery order of `files`
    dangling: FrozenSet[str] = frozenset()  # candidates of unresolved relative specifiers
    problems: Tuple[Tuple[str, str], ...] = ()
    error: Optional[str] = None

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class ChangeSet:
    """Normalized changed paths for one run."""

    paths: Tuple[str, ...] = ()
    deleted: FrozenSet[str] = frozenset()
    members: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", frozenset(self.paths))

    def __contains__(self, path: object) -> bool:
        return path in self.members

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)


@dataclass
class Diagnostics:
    """Soft problems recorded during a run (path -> reason)."""

    problems: Dict[str, str] = field(default_factory=dict)

    def add(self, path: str, reason: str) -> None:
        self.problems.setdefault(path, reason)

    def merge(self, items: Iterable[Tuple[str, str]]) -> None:
        for path, reason in items:
            self.add(path, reason)

    def __len__(self) -> int:
        return len(self.problems)


@dataclass(frozen=True)
class ImpactEntry:
    test_file: str
    reason: ImpactReason
    trigger_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "testFile": self.test_file,
            "reason": self.reason.value,
            "triggerPath": self.trigger_path,
        }


@dataclass(frozen=True)
class ImpactResult:
    """Affected tests for one run, in discovery order."""

    entries: Tuple[ImpactEntry, ...] = ()
    tests_considered: int = 0
    diagnostics: Tuple[Tuple[str, str], ...] = ()

    def paths(self) -> List[str]:
        return [e.test_file for e in self.entries]

    def to_list(self) -> List[Dict[str, Optional[str]]]:
        return [e.to_dict() for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
