# src/task_relay/sync/change_log.py

from __future__ import annotations

"""
File-backed change log shared with the remote viewer.

Producer (viewer) appends toggles, postpones and new tasks to one JSON document.
Consumer (Synchronizer) claims the whole document, applies it entry by entry,
acknowledges each applied entry, and finally releases it.

Delivery is at least once:
- claim() renames the log to "<name>.processing", so producer appends made
  during a sync land in a fresh document instead of being deleted with it
- acknowledge() rewrites the claimed file without the applied entry, so a crash
  re-applies at most the entry that was in flight
- a claimed file left behind by a crash is resumed by the next claim()

There is no handshake with the producer: a producer that read the log right
before claim() and writes it right after can re-create entries already claimed.
"""

import contextlib
import json
import logging
import os
import time
from pathlib import Path

from ..tasks.task_models import ChangeBatch, NewTask, PendingChange, Postpone, Toggle

logger = logging.getLogger(__name__)


class JsonChangeLog:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._claimed_path = self._path.with_name(self._path.name + ".processing")
        self._claimed: ChangeBatch | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def claimed_path(self) -> Path:
        return self._claimed_path

    # ---- low-level helpers ----

    def _read(self, path: Path) -> ChangeBatch | None:
        """Load a batch from `path`; None if it does not exist. Corrupt files are moved aside."""
        try:
            raw = path.read_text("utf-8")
        except FileNotFoundError:
            return None

        if not raw.strip():
            return ChangeBatch()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            corrupt = path.with_name(f"{path.name}.corrupt-{int(time.time())}")
            logger.exception("Change log %s is not valid JSON; moving it to %s", path, corrupt)
            with contextlib.suppress(OSError):
                os.replace(path, corrupt)
            return ChangeBatch()

        return ChangeBatch.from_json(data)

    @staticmethod
    def _write(path: Path, batch: ChangeBatch) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(json.dumps(batch.to_json(), ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)

    # ---- producer side ----

    def _append(self, batch: ChangeBatch) -> None:
        current = self._read(self._path) or ChangeBatch()
        current.merge(batch)
        self._write(self._path, current)

    def append_toggle(self, task_id: str) -> None:
        if not task_id:
            raise ValueError("task_id is required")
        self._append(ChangeBatch(toggles={task_id: True}))
        logger.info("Queued toggle %s", task_id)

    def append_postpone(self, task_id: str, new_date: str) -> None:
        if not task_id:
            raise ValueError("task_id is required")
        if not new_date or not new_date.strip():
            raise ValueError("new_date is required")
        self._append(ChangeBatch(postpones={task_id: new_date.strip()}))
        logger.info("Queued postpone %s -> %s", task_id, new_date)

    def append_new_task(self, text: str, key: str | None = None) -> str:
        if not text or not text.strip():
            raise ValueError("text is required")
        key = key or str(int(time.time() * 1000))
        self._append(ChangeBatch(new_tasks={key: text.strip()}))
        logger.info("Queued new task key=%s", key)
        return key

    def peek(self) -> ChangeBatch:
        """Everything pending (claimed leftovers + fresh log) without claiming it."""
        batch = ChangeBatch()
        for path in (self._claimed_path, self._path):
            loaded = self._read(path)
            if loaded is not None:
                batch.merge(loaded)
        return batch

    # ---- consumer side ----

    def claim(self) -> ChangeBatch | None:
        """
        Take ownership of pending changes.

        Returns None when there is nothing to claim (no log at all).
        """
        batch = self._read(self._claimed_path)
        if batch is not None:
            logger.warning("Resuming claimed change log left by an interrupted sync: %s", self._claimed_path)

        if self._path.exists():
            if batch is None:
                os.replace(self._path, self._claimed_path)
                batch = self._read(self._claimed_path)
            else:
                batch.merge(self._read(self._path) or ChangeBatch())
                self._write(self._claimed_path, batch)
                with contextlib.suppress(FileNotFoundError):
                    self._path.unlink()

        self._claimed = batch
        if batch is not None:
            logger.info(
                "Claimed change log: toggles=%d postpones=%d new_tasks=%d",
                len(batch.toggles),
                len(batch.postpones),
                len(batch.new_tasks),
            )
        return batch

    def acknowledge(self, change: PendingChange) -> None:
        """Drop one applied (or deliberately skipped) entry from the claimed log."""
        if self._claimed is None:
            raise RuntimeError("acknowledge() called without a claimed change log")
        self._claimed.discard(change)
        self._write(self._claimed_path, self._claimed)

    def release(self) -> int:
        """
        Finish the claim. Deletes the claimed file when everything was acknowledged;
        otherwise keeps the remaining entries for the next run. Returns how many remain.
        """
        batch, self._claimed = self._claimed, None
        if batch is None:
            return 0

        if batch.is_empty():
            with contextlib.suppress(FileNotFoundError):
                self._claimed_path.unlink()
            logger.info("Change log cleared")
            return 0

        self._write(self._claimed_path, batch)
        logger.warning("Change log released with %d unapplied entries", len(batch))
        return len(batch)


def describe_change(change: PendingChange) -> str:
    if isinstance(change, Toggle):
        return f"toggle {change.task_id}"
    if isinstance(change, Postpone):
        return f"postpone {change.task_id} -> {change.new_date}"
    if isinstance(change, NewTask):
        return f"new task {change.key!r}"
    return repr(change)
