# src/task_relay/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILENAME = "task-relay.log"

# task_relay loggers that only reach the console at the given level or above.
_QUIET_ON_CONSOLE: dict[str, int] = {
    # one line per pass, every interval
    "task_relay.sync.sync_scheduler": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console view of the logs.

    task-relay's own records pass, except the loggers listed in
    _QUIET_ON_CONSOLE. Captured Python warnings and other libraries' loggers
    need ERROR+. The log file gets everything.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("task_relay."):
            return record.levelno >= logging.ERROR

        for prefix, level in _QUIET_ON_CONSOLE.items():
            if name.startswith(prefix):
                return record.levelno >= level
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/task-relay",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (filtered) and to task-relay.log under log_dir (everything at file_level+).

    Replaces any handlers already on the root logger, so call it once from the
    CLI entrypoint before the first record is emitted. Returns the log file path.
    """
    log_dir = Path(log_dir).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) -> "py.warnings" logger
    logging.captureWarnings(True)
    return log_file
