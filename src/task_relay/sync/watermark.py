# src/task_relay/sync/watermark.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class SyncWatermark:
    """
    Persisted `last_sync` timestamp (epoch seconds).

    Owned by the Synchronizer and advanced only after a pass without fatal errors.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> float:
        if not self._path.exists():
            return 0.0
        try:
            data = json.loads(self._path.read_text("utf-8"))
            return float(data.get("last_sync", 0.0)) if isinstance(data, dict) else 0.0
        except (ValueError, TypeError, OSError):
            logger.exception("Failed to read sync watermark from %s; treating as never synced", self._path)
            return 0.0

    def advance(self, now_ts: float | None = None) -> float:
        ts = time.time() if now_ts is None else float(now_ts)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"last_sync": ts}), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)
        logger.debug("Sync watermark advanced to %s", ts)
        return ts
