"""testimpact: static test impact resolution for JavaScript/TypeScript projects.

Usage:
    from testimpact import TestImpactResolver
    resolver = TestImpactResolver("/path/to/repo")
    result = resolver.affected(["src/a.ts"])
"""

from .api import TestImpactResolver
from .core.models import ImpactEntry, ImpactReason, ImpactResult

__all__ = ["ImpactEntry", "ImpactReason", "ImpactResult", "TestImpactResolver"]

__version__ = "0.1.0"
