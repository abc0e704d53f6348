"""Dependency closure construction tests."""

from __future__ import annotations

from testimpact.analysis.extractor import Extraction
from testimpact.analysis.graph import DependencyGraphBuilder


def test_transitive_closure(make_tree):
    root = make_tree(
        {
            "src/c.ts": "export const c = 1;\n",
            "src/b.ts": 'export * from "./c";\n',
            "src/a.ts": 'import { c } from "./b";\n',
            "src/a.test.ts": 'import "./a";\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/a.test.ts")
    assert closure.files == {"src/a.ts", "src/b.ts", "src/c.ts"}
    assert closure.order == ("src/a.ts", "src/b.ts", "src/c.ts")


def test_cycle_terminates_with_each_file_once(make_tree):
    root = make_tree(
        {
            "src/a.ts": 'import { b } from "./b";\nexport const a = 1;\n',
            "src/b.ts": 'import { a } from "./a";\nexport const b = 2;\n',
            "src/cycle.test.ts": 'import { a } from "./a";\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/cycle.test.ts")
    assert closure.files == {"src/a.ts", "src/b.ts"}
    assert len(closure.order) == 2


def test_test_file_never_in_its_own_closure(make_tree):
    root = make_tree(
        {
            "src/a.ts": 'import "./self.test";\n',
            "src/self.test.ts": 'import "./a";\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/self.test.ts")
    assert "src/self.test.ts" not in closure
    assert closure.files == {"src/a.ts"}


def test_external_packages_add_no_nodes(make_tree):
    root = make_tree(
        {
            "widgets.ts": "export const w = 1;\n",
            "src/c.test.ts": 'import { w } from "widgets";\nconst r = require("react");\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/c.test.ts")
    assert closure.files == frozenset()
    assert closure.dangling == frozenset()


def test_unresolved_relative_specifiers_are_dangling(make_tree):
    root = make_tree({"src/gone.test.ts": 'import { x } from "./removed";\n'})
    closure = DependencyGraphBuilder(root).closure_for("src/gone.test.ts")
    assert closure.files == frozenset()
    assert "src/removed.ts" in closure.dangling
    assert "src/removed/index.js" in closure.dangling


def test_non_source_leaves_are_included_but_not_parsed(make_tree):
    root = make_tree(
        {
            "src/data.json": '{"not": "js"}',
            "src/logo.svg": "<svg/>",
            "src/x.test.ts": 'import data from "./data.json";\nimport logo from "./logo.svg";\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/x.test.ts")
    assert closure.files == {"src/data.json", "src/logo.svg"}
    assert closure.problems == ()


def test_unparseable_file_is_a_leaf_with_a_problem(make_tree):
    root = make_tree(
        {
            "src/broken.ts": 'import "./hidden";\nconst = ;;; {{\n',
            "src/hidden.ts": "export {};\n",
            "src/x.test.ts": 'import "./broken";\n',
        }
    )
    closure = DependencyGraphBuilder(root).closure_for("src/x.test.ts")
    assert closure.files == {"src/broken.ts"}
    assert dict(closure.problems) == {"src/broken.ts": "syntax"}


def test_undecodable_file_is_a_leaf_with_a_problem(make_tree):
    root = make_tree({"src/x.test.ts": 'import "./latin";\n'})
    (root / "src" / "latin.ts").write_bytes(b"const s = '\xff\xfe';\n")
    closure = DependencyGraphBuilder(root).closure_for("src/x.test.ts")
    assert closure.files == {"src/latin.ts"}
    assert dict(closure.problems) == {"src/latin.ts": "decode"}


def test_build_all_keeps_order_and_matches_serial(make_tree):
    files = {"src/shared.ts": "export const s = 1;\n"}
    for i in range(12):
        files[f"src/t{i:02d}.test.ts"] = 'import "./shared";\n'
    root = make_tree(files)
    tests = sorted(p for p in files if p.endswith(".test.ts"))

    builder = DependencyGraphBuilder(root)
    parallel = builder.build_all(tests, workers=4)
    serial = builder.build_all(tests, workers=1)

    assert [c.test_file for c in parallel] == tests
    assert parallel == serial
    assert all(c.files == {"src/shared.ts"} for c in parallel)


def test_failing_closure_does_not_affect_siblings(make_tree):
    root = make_tree(
        {
            "src/a.ts": "export const a = 1;\n",
            "src/bad.test.ts": 'import "./a";\n',
            "src/good.test.ts": 'import "./a";\n',
        }
    )

    class Exploding:
        def extract(self, text, path):
            if path == "src/bad.test.ts":
                raise RuntimeError("boom")
            return Extraction(specifiers=("./a",) if path.endswith(".test.ts") else ())

    builder = DependencyGraphBuilder(root, extractor=Exploding())
    bad, good = builder.build_all(["src/bad.test.ts", "src/good.test.ts"], workers=2)

    assert bad.error is not None and "boom" in bad.error
    assert bad.files == frozenset()
    assert good.error is None
    assert good.files == {"src/a.ts"}


def test_build_all_empty():
    assert DependencyGraphBuilder(".").build_all([]) == []
