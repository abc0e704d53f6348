"""Change set normalization tests."""

from __future__ import annotations

import pytest

from testimpact.analysis.changeset import ChangeSetNormalizer
from testimpact.errors import ChangeSetError


@pytest.fixture
def normalizer(make_tree):
    root = make_tree({"src/a.ts": "", "src/b.ts": ""})
    return ChangeSetNormalizer(root)


def test_separators_and_dot_segments(normalizer):
    assert normalizer.normalize_path("src\\a.ts") == "src/a.ts"
    assert normalizer.normalize_path("./src/a.ts") == "src/a.ts"
    assert normalizer.normalize_path("src/./lib/../a.ts") == "src/a.ts"
    assert normalizer.normalize_path("  src/a.ts\r") == "src/a.ts"


def test_normalization_is_idempotent(normalizer):
    for raw in ("src\\a.ts", "./src/x/../b.ts", "deep//nested/./c.tsx"):
        once = normalizer.normalize_path(raw)
        assert normalizer.normalize_path(once) == once


def test_absolute_path_inside_root(normalizer):
    absolute = str(normalizer.root / "src" / "a.ts")
    assert normalizer.normalize_path(absolute) == "src/a.ts"


def test_paths_outside_root_are_rejected(normalizer, tmp_path):
    with pytest.raises(ChangeSetError):
        normalizer.normalize_path("../elsewhere.ts")
    with pytest.raises(ChangeSetError):
        normalizer.normalize_path(str(tmp_path / "elsewhere.ts"))


def test_nul_bytes_are_rejected(normalizer):
    with pytest.raises(ChangeSetError):
        normalizer.normalize_path("src/a\0.ts")


def test_parse_skips_blank_lines_and_deduplicates(normalizer):
    change_set = normalizer.parse("src/a.ts\n\n./src/a.ts\r\nsrc/b.ts\n   \n")
    assert change_set.paths == ("src/a.ts", "src/b.ts")
    assert "src/b.ts" in change_set
    assert len(change_set) == 2


def test_empty_input_is_an_empty_change_set(normalizer):
    change_set = normalizer.parse("")
    assert not change_set
    assert change_set.paths == ()


def test_deleted_paths_are_flagged(normalizer):
    change_set = normalizer.parse("src/a.ts\nsrc/removed.ts\n")
    assert change_set.deleted == {"src/removed.ts"}
