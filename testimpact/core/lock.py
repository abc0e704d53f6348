"""Advisory file lock serializing cache writes between concurrent runs."""

from __future__ import annotations

import time
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional

from ..observability import get_logger

logger = get_logger(__name__)

LOCK_FILENAME = "lock"
POLL_INTERVAL_S = 0.02


def _open_lock_file(cache_dir: Path) -> Optional[IO[str]]:
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        return (cache_dir / LOCK_FILENAME).open("a+", encoding="utf-8")
    except OSError as e:
        logger.debug("cache_lock_open_failed", path=str(cache_dir), error=str(e))
        return None


def _acquire(handle: IO[str], deadline: float) -> bool:
    try:
        import fcntl
    except ImportError:
        # no flock on this platform, so writes go unserialized
        return False

    while True:
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            return True
        except BlockingIOError:
            if time.monotonic() >= deadline:
                return False
            time.sleep(POLL_INTERVAL_S)
        except OSError as e:
            logger.debug("cache_lock_failed", error=str(e))
            return False


def _release(handle: IO[str]) -> None:
    import fcntl

    fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def cache_write_lock(cache_dir: Path, *, timeout_s: float = 2.0) -> Iterator[bool]:
    """Hold `<cache_dir>/lock` for the duration of the block.

    Yields False instead of raising when the directory cannot be created, the
    lock file cannot be opened, or another process keeps the lock past
    `timeout_s`.
    """
    handle = _open_lock_file(cache_dir)
    if handle is None:
        yield False
        return

    with handle:
        locked = _acquire(handle, time.monotonic() + float(timeout_s))
        try:
            yield locked
        finally:
            if locked:
                _release(handle)
