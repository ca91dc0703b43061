# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from task_relay.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("task_relay.sync.synchronizer", logging.INFO, True),
        ("task_relay.sync.sync_scheduler", logging.INFO, False),
        ("task_relay.sync.sync_scheduler", logging.WARNING, True),
        ("py.warnings", logging.WARNING, False),
        ("urllib3.connectionpool", logging.WARNING, False),
        ("urllib3.connectionpool", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


@pytest.fixture()
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.usefixtures("_restore_root_logger")
def test_file_log_gets_everything(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("task_relay.sync.sync_scheduler").debug("quiet pass")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "task-relay.log"
    assert "quiet pass" in log_file.read_text("utf-8")
