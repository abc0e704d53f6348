"""Core data model, path handling and the persistent specifier cache."""

from .models import (
    UNRESOLVED,
    ChangeSet,
    DependencyClosure,
    Diagnostics,
    ImpactEntry,
    ImpactReason,
    ImpactResult,
    SourceFile,
)

__all__ = [
    "UNRESOLVED",
    "ChangeSet",
    "DependencyClosure",
    "Diagnostics",
    "ImpactEntry",
    "ImpactReason",
    "ImpactResult",
    "SourceFile",
]
