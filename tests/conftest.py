"""Shared fixtures: small JS/TS project trees on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pytest
import structlog


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path):
    """Write `{relative path: content}` under a fresh project root."""

    def _make(files: Dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        return write_tree(root, files)

    return _make


@pytest.fixture
def scenario_project(make_tree):
    """a.ts <- b.ts; a.test.ts -> a.ts; b.test.ts -> b.ts; c.test.ts -> widgets."""
    return make_tree(
        {
            "src/a.ts": "export const a = 1;\n",
            "src/b.ts": 'import { a } from "./a";\nexport const b = a + 1;\n',
            "src/a.test.ts": 'import { a } from "./a";\ntest("a", () => expect(a).toBe(1));\n',
            "src/b.test.ts": 'import { b } from "./b";\ntest("b", () => expect(b).toBe(2));\n',
            "src/c.test.ts": 'import { render } from "widgets";\ntest("c", () => render());\n',
        }
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_testimpact", False):
            root.removeHandler(handler)
    structlog.reset_defaults()
