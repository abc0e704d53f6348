"""Persistent specifier cache keyed by file path and content hash.

Lets repeated runs skip re-parsing unchanged files. Stored as a single JSON
document under the cache directory and rewritten atomically at run end.
"""

from __future__ import annotations

import hashlib
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple

from ..observability import get_logger
from .lock import cache_write_lock

logger = get_logger(__name__)

CACHE_VERSION = 1
CACHE_FILENAME = "specifiers.json"


def content_digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()


def _write_json_atomic(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, ensure_ascii=False, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


class SpecifierCache:
    """path + sha256(text) -> specifier tuple.

    Safe to share between builder workers; mutations are serialized by a lock.
    Only entries looked up or stored during this run are written back, so files
    deleted or renamed since the last run drop out.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = cache_dir
        self.path = cache_dir / CACHE_FILENAME
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._seen: Set[str] = set()
        self._lock = threading.Lock()
        self._dirty = False
        self.hits = 0
        self.misses = 0

    def load(self) -> "SpecifierCache":
        if not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("cache_unreadable", path=str(self.path), error=str(e))
            return self
        if not isinstance(data, dict) or data.get("version") != CACHE_VERSION:
            return self
        entries = data.get("entries")
        if isinstance(entries, dict):
            self._entries = {k: v for k, v in entries.items() if isinstance(v, dict)}
        return self

    def get(self, path: str, digest: str) -> Optional[Tuple[str, ...]]:
        with self._lock:
            self._seen.add(path)
            entry = self._entries.get(path)
            if entry is None or entry.get("sha256") != digest:
                self.misses += 1
                return None
            specs = entry.get("specifiers")
            if not isinstance(specs, list):
                self.misses += 1
                return None
            self.hits += 1
            return tuple(str(s) for s in specs)

    def put(self, path: str, digest: str, specifiers: Tuple[str, ...]) -> None:
        with self._lock:
            self._seen.add(path)
            current = self._entries.get(path)
            if current is not None and current.get("sha256") == digest:
                return
            self._entries[path] = {"sha256": digest, "specifiers": list(specifiers)}
            self._dirty = True

    def save(self, *, prune: bool = True) -> bool:
        """Persist entries if anything changed. Returns True if written.

        With `prune`, entries not looked up or stored since `load()` are
        dropped first. Write failures are logged and reported as False.
        """
        with self._lock:
            if prune:
                stale = [p for p in self._entries if p not in self._seen]
                for p in stale:
                    del self._entries[p]
                if stale:
                    self._dirty = True
            if not self._dirty:
                return False
            payload = {"version": CACHE_VERSION, "entries": dict(self._entries)}

        try:
            with cache_write_lock(self.cache_dir) as locked:
                if not locked:
                    logger.warning("cache_lock_unavailable", path=str(self.path))
                    return False
                _write_json_atomic(self.path, payload)
        except OSError as e:
            logger.warning("cache_write_failed", path=str(self.path), error=str(e))
            return False

        with self._lock:
            self._dirty = False
        logger.debug("cache_saved", path=str(self.path), entries=len(payload["entries"]))
        return True

    def __len__(self) -> int:
        return len(self._entries)
