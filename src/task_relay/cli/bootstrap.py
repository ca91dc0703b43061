# src/task_relay/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the settings snapshot once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (vault store, change log, watermark, publisher, lock file).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.locking import LOCK_FILENAME
from ..core.state import AppState
from ..publish.publishers import create_publisher
from ..storage.vault_store import FileSystemDocumentStore
from ..sync.change_log import JsonChangeLog
from ..sync.watermark import SyncWatermark

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.change_log_path.parent.mkdir(parents=True, exist_ok=True)
    settings.watermark_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    publisher = create_publisher(settings)
    if publisher is None:
        logger.info("No publish target configured; publishing is disabled")

    return AppState(
        settings=settings,
        store=FileSystemDocumentStore(settings.vault_dir),
        change_log=JsonChangeLog(settings.change_log_path),
        watermark=SyncWatermark(settings.watermark_path),
        publisher=publisher,
        lock_path=settings.data_dir / LOCK_FILENAME,
    )
