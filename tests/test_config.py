"""Configuration loading tests."""

from __future__ import annotations

import pytest

from testimpact.api import TestImpactResolver
from testimpact.config import CONFIG_FILENAME, ResolverConfig, load_config, save_config
from testimpact.errors import ConfigError


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path)
    assert config == ResolverConfig()
    assert config.extensions[0] == ""
    assert "node_modules" in config.exclude_dirs


def test_yaml_overrides(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text(
        "test_dirs: [tests]\nworkers: 3\ncache: false\nunknown_key: 1\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.test_dirs == ["tests"]
    assert config.workers == 3
    assert config.cache is False


def test_invalid_types_raise(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("workers: many\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_mapping_raises(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unparsable_yaml_falls_back_to_defaults(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("test_dirs: [unclosed\n", encoding="utf-8")
    assert load_config(tmp_path) == ResolverConfig()


def test_save_then_load(tmp_path):
    config = ResolverConfig(workers=2, cache_dir=".cache/ti")
    save_config(tmp_path, config)
    assert load_config(tmp_path) == config
    assert config.resolve_cache_dir(tmp_path) == tmp_path / ".cache/ti"


def test_project_config_drives_discovery(make_tree):
    root = make_tree(
        {
            CONFIG_FILENAME: "test_dirs: [tests]\ncache: false\n",
            "src/a.ts": "export const a = 1;\n",
            "tests/a.ts": 'import "../src/a";\n',
        }
    )
    resolver = TestImpactResolver(root)
    assert resolver.test_files() == ["tests/a.ts"]
    assert resolver.affected(["src/a.ts"]).paths() == ["tests/a.ts"]
