# src/task_relay/sync/sync_scheduler.py

from __future__ import annotations

"""
Periodic sync loop.

Runs one sync right away (startup), then every interval_minutes.
interval_minutes == 0 disables the periodic part: only the startup pass runs.

Failures are reported by sync_tasks() and never stop the loop.
To stop the scheduler, cancel the coroutine/task.
"""

import asyncio
import logging

from ..core.service import sync_tasks
from ..core.state import AppState

logger = logging.getLogger(__name__)


async def run_sync_scheduler(
        state: AppState,
        *,
        interval_minutes: float | None = None,
        startup_delay_seconds: float = 0.0,
) -> None:
    if interval_minutes is None:
        interval_minutes = float(getattr(state.settings, "sync_interval_minutes", 0) or 0)
    sleep_s = max(0.0, float(interval_minutes)) * 60.0

    if startup_delay_seconds > 0:
        await asyncio.sleep(startup_delay_seconds)

    while True:
        try:
            result = await sync_tasks(state)
            if result.ok:
                logger.info(result.message)
            else:
                logger.warning(result.message)
        except Exception:
            logger.exception("sync pass crashed")

        if sleep_s <= 0:
            logger.info("Periodic sync disabled; startup sync done")
            return

        await asyncio.sleep(sleep_s)
