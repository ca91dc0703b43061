# tests/test_sync_scheduler.py

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from task_relay.core.state import AppState
from task_relay.sync import sync_scheduler
from task_relay.sync.sync_scheduler import run_sync_scheduler

from .conftest import write_doc
from .fakes import InMemoryDocumentStore


class _StopLoop(Exception):
    pass


@pytest.mark.asyncio
async def test_zero_interval_runs_startup_sync_only(state: AppState, vault: Path) -> None:
    doc = write_doc(vault, "todo.md", "- [ ] call mom")
    state.change_log.append_toggle("todo.md:0")

    await run_sync_scheduler(state, interval_minutes=0)

    assert doc.read_text("utf-8") == "- [x] call mom"
    assert state.watermark.load() > 0


@pytest.mark.asyncio
async def test_interval_defaults_to_settings(state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
    state.settings.sync_interval_minutes = 2
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        raise _StopLoop()

    monkeypatch.setattr(sync_scheduler.asyncio, "sleep", fake_sleep)

    with pytest.raises(_StopLoop):
        await run_sync_scheduler(state)

    assert sleeps == [120.0]


@pytest.mark.asyncio
async def test_failed_pass_does_not_stop_the_loop(state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
    # no intake document can be created or found: every pass is fatal
    broken = replace(state, store=InMemoryDocumentStore(fail_create=True))
    broken.change_log.append_new_task("survive", key="1")
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) >= 2:
            raise _StopLoop()

    monkeypatch.setattr(sync_scheduler.asyncio, "sleep", fake_sleep)

    with pytest.raises(_StopLoop):
        await run_sync_scheduler(broken, interval_minutes=1)

    assert sleeps == [60.0, 60.0]
    assert broken.change_log.peek().new_tasks == {"1": "survive"}
    assert broken.watermark.load() == 0.0
