"""TypeScript/JavaScript tree-sitter import extraction.

Recognised forms:
    import x from "./a"        import "./a"        export { y } from "./a"
    import x = require("./a")  require("./a")      import("./a")

Call forms also accept template literals without substitutions.
"""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from . import iter_named_nodes, node_text


def _string_value(src: bytes, node: Optional[Node]) -> Optional[str]:
    """Literal value of a string or substitution-free template node."""
    if node is None:
        return None
    if node.type == "string":
        raw = node_text(src, node)
        return raw[1:-1] if len(raw) >= 2 else None
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        raw = node_text(src, node)
        return raw[1:-1] if len(raw) >= 2 else None
    return None


def _statement_source(src: bytes, node: Node) -> Optional[str]:
    source = node.child_by_field_name("source")
    if source is not None:
        return _string_value(src, source)
    # import x = require("./a")
    for child in node.named_children:
        if child.type == "import_require_clause":
            source = child.child_by_field_name("source")
            if source is None:
                source = next((c for c in child.named_children if c.type == "string"), None)
            return _string_value(src, source)
    return None


def _call_source(src: bytes, node: Node) -> Optional[str]:
    fn_node = node.child_by_field_name("function")
    if fn_node is None:
        return None
    is_dynamic_import = fn_node.type == "import"
    is_require = fn_node.type == "identifier" and node_text(src, fn_node) == "require"
    if not (is_dynamic_import or is_require):
        return None

    args_node = node.child_by_field_name("arguments")
    if args_node is None or len(args_node.named_children) != 1:
        return None
    return _string_value(src, args_node.named_children[0])


def extract_import_specs(src: bytes, root: Node) -> List[str]:
    """Extract import specifiers in source order, first occurrence wins."""
    specs: List[str] = []
    seen = set()
    for node in iter_named_nodes(root):
        if node.type in ("import_statement", "export_statement"):
            spec = _statement_source(src, node)
        elif node.type == "call_expression":
            spec = _call_source(src, node)
        else:
            continue

        if spec and spec not in seen:
            seen.add(spec)
            specs.append(spec)
    return specs
