"""Source parsing for import extraction (tree-sitter backend)."""

from .config import detect_language, is_source_file
from .treesitter import extract_import_specs, parse_source

__all__ = ["detect_language", "extract_import_specs", "is_source_file", "parse_source"]
