# src/task_relay/core/service.py

from __future__ import annotations

"""
Top-level operations: publish and sync.

Both run under AppState.gate and the vault lock file (core.locking), so a publish
never interleaves with a sync against the same documents, whether the other
operation runs in this process or in another one.

Errors stop here: they are logged and turned into a single user-visible
OperationResult.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime

from ..errors import DocumentNotFoundError, PublishError, SyncError
from ..publish.page import build_page
from ..sync.synchronizer import Synchronizer, SyncReport
from ..tasks.extractor import extract_all
from ..tasks.renderer import render_query_blocks
from .locking import vault_lock
from .state import AppState

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OperationResult:
    ok: bool
    message: str
    report: SyncReport | None = None


def build_publish_content(state: AppState, *, today: date | None = None, now: datetime | None = None) -> str:
    """Render the publish page's task queries and wrap them into a standalone HTML page."""
    settings = state.settings
    page_text = state.store.read(settings.publish_page_path)
    tasks = extract_all(state.store)
    content = render_query_blocks(page_text, tasks, today=today)
    return build_page(content, settings, now=now)


def _publish_blocking(state: AppState, today: date | None) -> None:
    if state.publisher is None:
        raise PublishError("No publisher configured (set TASKRELAY_GIT_REPO_URL or TASKRELAY_PUBLISH_DIR)")
    with vault_lock(state.lock_path):
        html = build_publish_content(state, today=today)
        state.publisher.push(html)


async def publish_tasks(state: AppState, *, today: date | None = None) -> OperationResult:
    async with state.gate:
        try:
            await asyncio.to_thread(_publish_blocking, state, today)
        except DocumentNotFoundError:
            logger.warning("Publish page not found: %s", state.settings.publish_page_path)
            return OperationResult(False, "Publish page not found. Please check your settings.")
        except Exception:
            logger.exception("Error publishing tasks")
            return OperationResult(False, "Error publishing tasks. Check the log for details.")

    logger.info("Tasks published")
    return OperationResult(True, "Tasks published successfully!")


def _sync_blocking(state: AppState, today: date | None) -> SyncReport:
    syncer = Synchronizer(state.store, state.change_log, state.watermark, state.settings)
    with vault_lock(state.lock_path):
        return syncer.sync(today=today)


async def sync_tasks(state: AppState, *, today: date | None = None) -> OperationResult:
    async with state.gate:
        try:
            report = await asyncio.to_thread(_sync_blocking, state, today)
        except SyncError as e:
            logger.error("Error syncing tasks: %s", e)
            return OperationResult(False, "Error syncing tasks. Check the log for details.", e.report)
        except Exception:
            logger.exception("Error syncing tasks")
            return OperationResult(False, "Error syncing tasks. Check the log for details.")

    return OperationResult(True, "Tasks synced successfully!", report)
