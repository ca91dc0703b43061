# src/task_relay/core/state.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..sync.change_log import JsonChangeLog
from ..sync.watermark import SyncWatermark
from .ports import DocumentStore, Publisher


@dataclass
class AppState:
    # Immutable Settings snapshot; replace it (not its fields) when configuration changes.
    settings: Any

    store: DocumentStore
    change_log: JsonChangeLog
    watermark: SyncWatermark
    publisher: Publisher | None = None

    # Serializes publish and sync: both read-then-write whole documents.
    gate: asyncio.Lock = field(default_factory=asyncio.Lock)

    # Cross-process counterpart of `gate` (see core.locking); None disables it.
    lock_path: Path | None = None
