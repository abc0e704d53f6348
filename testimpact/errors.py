"""Exception taxonomy.

Only input errors are fatal. Per-file problems are recorded as diagnostics
and resolution misses are not errors at all.
"""


class TestImpactError(Exception):
    """Base class for all testimpact errors."""

    __test__ = False


class ProjectRootError(TestImpactError):
    """Project root is missing, not a directory, or unreadable."""


class ChangeSetError(TestImpactError):
    """Changed-file input is malformed or points outside the project root."""


class ConfigError(TestImpactError):
    """Project configuration has an invalid shape."""
