# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_relay.core.state import AppState
from task_relay.storage.vault_store import FileSystemDocumentStore
from task_relay.sync.change_log import JsonChangeLog
from task_relay.sync.watermark import SyncWatermark

from .fakes import FakePublisher


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture()
def settings(tmp_path: Path, vault: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the sync/publish modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="task-relay-test",
        vault_dir=vault,
        publish_page_path="Daily Tasks.md",
        intake_folder="Daily Notes",
        sync_interval_minutes=0,
        page_password="",
        data_dir=data_dir,
        change_log_path=data_dir / "pending_changes.json",
        watermark_path=data_dir / "sync_state.json",
    )


@pytest.fixture()
def store(vault: Path) -> FileSystemDocumentStore:
    return FileSystemDocumentStore(vault)


@pytest.fixture()
def change_log(settings: SimpleNamespace) -> JsonChangeLog:
    return JsonChangeLog(settings.change_log_path)


@pytest.fixture()
def watermark(settings: SimpleNamespace) -> SyncWatermark:
    return SyncWatermark(settings.watermark_path)


@pytest.fixture()
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: FileSystemDocumentStore,
    change_log: JsonChangeLog,
    watermark: SyncWatermark,
    publisher: FakePublisher,
) -> AppState:
    """
    AppState wired with the real file-backed stores and a recording publisher.

    NOTE: the vault, change log and watermark live under tmp_path; their
    on-disk behavior is part of what we want to test.
    """
    return AppState(
        settings=settings,
        store=store,
        change_log=change_log,
        watermark=watermark,
        publisher=publisher,
        lock_path=settings.data_dir / "task-relay.lock",
    )


def write_doc(vault: Path, rel: str, text: str) -> Path:
    path = vault / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
