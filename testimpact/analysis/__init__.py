"""Analysis components: extraction, resolution, discovery, closures, impact."""

from .changeset import ChangeSetNormalizer
from .discovery import TestDiscovery, is_test_file
from .extractor import CachingExtractor, Extraction, ImportExtractor
from .graph import DependencyGraphBuilder
from .impact import ImpactAnalyzer
from .resolver import ModuleResolver, is_path_specifier

__all__ = [
    "CachingExtractor",
    "ChangeSetNormalizer",
    "DependencyGraphBuilder",
    "Extraction",
    "ImpactAnalyzer",
    "ImportExtractor",
    "ModuleResolver",
    "TestDiscovery",
    "is_path_specifier",
    "is_test_file",
]
