"""Configuration management for testimpact.

Project settings live in `<root>/.testimpact.yaml`; every key is optional:

    extensions: ["", ".ts", ".tsx", ".js"]
    test_suffixes: [".test", ".spec"]
    test_dirs: ["__tests__"]
    exclude_dirs: ["node_modules", ".git", "dist"]
    workers: 8
    cache: true
    cache_dir: .testimpact
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import List, Optional

import yaml

from .analysis.discovery import DEFAULT_EXCLUDE_DIRS, DEFAULT_TEST_DIRS, DEFAULT_TEST_SUFFIXES
from .core.paths import get_cache_dir
from .errors import ConfigError
from .observability import get_logger
from .parser.config import CANDIDATE_EXTENSIONS

logger = get_logger(__name__)

CONFIG_FILENAME = ".testimpact.yaml"

_LIST_FIELDS = ("extensions", "test_suffixes", "test_dirs", "exclude_dirs")


@dataclass
class ResolverConfig:
    """testimpact configuration."""

    extensions: List[str] = field(default_factory=lambda: list(CANDIDATE_EXTENSIONS))
    test_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_TEST_SUFFIXES))
    test_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_TEST_DIRS))
    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    workers: Optional[int] = None  # None = one per CPU
    cache: bool = True
    cache_dir: Optional[str] = None  # relative to the project root

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def resolve_cache_dir(self, root: Path) -> Path:
        if self.cache_dir:
            p = Path(self.cache_dir)
            return p if p.is_absolute() else root / p
        return get_cache_dir(root)


def config_from_dict(data: dict) -> ResolverConfig:
    """Build a config from a mapping, ignoring unknown keys.

    Raises:
        ConfigError: a known key has the wrong type
    """
    known = {f.name for f in fields(ResolverConfig)}
    values = {k: v for k, v in data.items() if k in known}

    for key in _LIST_FIELDS:
        if key not in values:
            continue
        value = values[key]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{key} must be a list of strings")
    if "workers" in values and values["workers"] is not None:
        if not isinstance(values["workers"], int) or isinstance(values["workers"], bool) or values["workers"] < 1:
            raise ConfigError("workers must be a positive integer")
    if "cache" in values and not isinstance(values["cache"], bool):
        raise ConfigError("cache must be true or false")
    if "cache_dir" in values and values["cache_dir"] is not None and not isinstance(values["cache_dir"], str):
        raise ConfigError("cache_dir must be a string")

    return ResolverConfig(**values)


def load_config(root: Path) -> ResolverConfig:
    """Load config from `<root>/.testimpact.yaml` if it exists.

    An unreadable or unparsable file falls back to defaults with a warning.

    Raises:
        ConfigError: the document is not a mapping or has invalid values
    """
    config_file = Path(root) / CONFIG_FILENAME
    if not config_file.exists():
        return ResolverConfig()

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("config_unreadable", path=str(config_file), error=str(e))
        return ResolverConfig()

    if data is None:
        return ResolverConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping")
    return config_from_dict(data)


def save_config(root: Path, config: ResolverConfig) -> Path:
    """Write config to `<root>/.testimpact.yaml`."""
    config_file = Path(root) / CONFIG_FILENAME
    config_file.write_text(yaml.safe_dump(config.to_dict(), default_flow_style=False), encoding="utf-8")
    return config_file
