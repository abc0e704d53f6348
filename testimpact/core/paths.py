"""Path canonicalization shared by the resolver, discovery and change sets.

Every path handed between components is root-relative, posix-separated and
free of `.`/`..` segments.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


def normalize_path(path: str) -> str:
    """Normalize path to posix style, collapsing `.` and `..` segments.

    `..` segments that would climb above the first segment are dropped.
    Use `join_within_root` when escaping must be detected instead.
    """
    parts = path.replace("\\", "/").split("/")
    out: List[str] = []
    for part in parts:
        if not part or part == ".":
            continue
        if part == "..":
            if out:
                out.pop()
            continue
        out.append(part)
    return "/".join(out)


def join_within_root(base_dir: str, rel: str) -> Optional[str]:
    """Join a root-relative directory with a relative path.

    Returns None if the result would climb above the project root.
    """
    out: List[str] = [p for p in base_dir.replace("\\", "/").split("/") if p and p != "."]
    for part in rel.replace("\\", "/").split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            if not out:
                return None
            out.pop()
            continue
        out.append(part)
    return "/".join(out)


def parent_dir(rel_path: str) -> str:
    """Root-relative directory of a root-relative file path ("" for the root)."""
    return rel_path.rsplit("/", 1)[0] if "/" in rel_path else ""


def relative_to_root(root: Path, path: str | Path) -> Optional[str]:
    """Convert an absolute or root-relative path to the canonical form.

    Returns None when an absolute path is not inside `root`.
    """
    p = str(path).replace("\\", "/")
    if os.path.isabs(p) or Path(p).is_absolute():
        try:
            rel = os.path.relpath(os.path.normpath(p), os.path.normpath(str(root)))
        except ValueError:
            return None
        rel = rel.replace("\\", "/")
        if rel == ".":
            return ""
        if rel == ".." or rel.startswith("../"):
            return None
        return normalize_path(rel)
    return join_within_root("", p)


def get_cache_dir(project_dir: Path) -> Path:
    """Return the directory used for testimpact artifacts.

    Defaults to `<project_dir>/.testimpact`.
    Override with `TESTIMPACT_CACHE_DIR` (absolute path recommended).
    """
    override = (os.environ.get("TESTIMPACT_CACHE_DIR") or "").strip()
    if override:
        p = Path(override)
        return p if p.is_absolute() else (Path.cwd() / p).resolve()
    return project_dir / ".testimpact"
