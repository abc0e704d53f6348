"""Text renderings of an ImpactResult.

Every renderer is a pure function of the result, so identical results give
byte-identical output.
"""

from __future__ import annotations

import json
from typing import Callable, Dict

from ..core.models import DependencyClosure, ImpactResult

FIELDS = ("testFile", "reason", "triggerPath")


def render_paths(result: ImpactResult) -> str:
    """One affected test path per line."""
    return "".join(f"{path}\n" for path in result.paths())


def render_json(result: ImpactResult) -> str:
    return json.dumps(result.to_list(), indent=2, ensure_ascii=False) + "\n"


def render_tsv(result: ImpactResult) -> str:
    lines = ["\t".join(FIELDS)]
    for row in result.to_list():
        lines.append("\t".join(row[k] or "" for k in FIELDS))
    return "\n".join(lines) + "\n"


FORMATS: Dict[str, Callable[[ImpactResult], str]] = {
    "paths": render_paths,
    "json": render_json,
    "tsv": render_tsv,
}


def render(result: ImpactResult, fmt: str = "paths") -> str:
    try:
        renderer = FORMATS[fmt]
    except KeyError:
        raise ValueError(f"unknown format: {fmt} (expected one of {', '.join(FORMATS)})") from None
    return renderer(result)


def render_closure(closure: DependencyClosure) -> str:
    """Closure of one test in BFS order, one path per line."""
    return "".join(f"{path}\n" for path in closure.order)
