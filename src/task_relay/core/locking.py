# src/task_relay/core/locking.py

from __future__ import annotations

"""
Cross-process lock for the vault.

AppState.gate only serializes work inside one process. A long-running
`task-relay run` and a one-shot `task-relay publish` are separate processes,
so publish and sync also take an advisory flock on a file under data_dir.
POSIX only.
"""

import contextlib
import fcntl
import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

LOCK_FILENAME = "task-relay.lock"


@contextlib.contextmanager
def vault_lock(path: str | Path | None) -> Iterator[None]:
    """Hold an exclusive flock on `path` for the duration of the block. Blocks while another process holds it."""
    if path is None:
        yield
        return

    lock_path = Path(path).expanduser()
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a", encoding="utf-8") as lf:
        try:
            fcntl.flock(lf.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            logger.info("Waiting for another task-relay process to release %s", lock_path)
            fcntl.flock(lf.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lf.fileno(), fcntl.LOCK_UN)
