"""Tree-sitter backend.

Parses JavaScript/TypeScript sources and exposes the AST helpers used by
the language extraction modules.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from ..config import detect_language


@dataclass(frozen=True)
class TsParsed:
    """Parsed source code with tree-sitter AST."""

    language: str
    src: bytes
    tree: Any
    root: Node

    @property
    def has_error(self) -> bool:
        return bool(self.root.has_error)


# Parsers are not thread-safe; builder workers each get their own.
_THREAD_LOCAL = threading.local()


def _get_parser(language_name: str) -> Parser:
    """Get or create a thread-local parser for the given language."""
    parsers = getattr(_THREAD_LOCAL, "parsers", None)
    if parsers is None:
        parsers = {}
        _THREAD_LOCAL.parsers = parsers

    parser = parsers.get(language_name)
    if parser is None:
        lang = get_language(language_name)
        parser = Parser()
        if hasattr(parser, "set_language"):
            parser.set_language(lang)
        else:
            parser.language = lang
        parsers[language_name] = parser
    return parser


def iter_named_nodes(root: Node) -> Iterable[Node]:
    """Iterate over all named nodes in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        for child in reversed(node.named_children):
            stack.append(child)


def node_text(src: bytes, node: Node) -> str:
    """Extract text content of a node."""
    return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def parse_source(text: str, *, file_path: str) -> Optional[TsParsed]:
    """Parse source code with tree-sitter.

    Returns:
        TsParsed object or None if the file type is not supported
    """
    language = detect_language(file_path)
    if language is None:
        return None

    src = text.encode("utf-8", errors="replace")
    parser = _get_parser(language)
    tree = parser.parse(src)
    return TsParsed(language=language, src=src, tree=tree, root=tree.root_node)


def import_specs_from_parsed(parsed: TsParsed) -> List[str]:
    from . import typescript as ts_ext

    return ts_ext.extract_import_specs(parsed.src, parsed.root)


def extract_import_specs(text: str, *, file_path: str) -> List[str]:
    """Parse source and extract import specifiers."""
    parsed = parse_source(text, file_path=file_path)
    return import_specs_from_parsed(parsed) if parsed else []


__all__ = [
    "TsParsed",
    "extract_import_specs",
    "import_specs_from_parsed",
    "iter_named_nodes",
    "node_text",
    "parse_source",
]
