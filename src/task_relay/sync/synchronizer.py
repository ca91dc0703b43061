# src/task_relay/sync/synchronizer.py

from __future__ import annotations

"""
Synchronizer.

Applies changes queued by the remote viewer back onto the documents:

    ReadLog -> ApplyToggles -> ApplyPostpones -> ApplyNewTasks -> ClearLog -> AdvanceWatermark

- every entry is applied on its own; a failing entry is logged and the loop continues
- a failing category does not stop later categories
- the only fatal path is "no intake document for new tasks": the remaining new
  tasks stay in the change log, the watermark is not advanced, SyncError is raised
- nothing is rolled back; documents already written stay written
"""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..core.ports import DocumentStore
from ..errors import DocumentNotFoundError, MalformedLineError, ResolutionExhaustedError, SyncError
from ..tasks.extractor import TASK_LINE_RE, contains_tasks
from ..tasks.task_models import DUE_MARKER, NewTask, Postpone, Toggle, parse_task_id
from .change_log import JsonChangeLog, describe_change
from .watermark import SyncWatermark

logger = logging.getLogger(__name__)

DUE_PAIR_RE = re.compile(r"\s*" + re.escape(DUE_MARKER) + r"\s*\d{4}-\d{2}-\d{2}")
TASKS_HEADING_RE = re.compile(r"^#{1,2} Tasks[ \t]*(?=\r?$)", re.MULTILINE)
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def daily_note_template(date_string: str) -> str:
    return f"# {date_string}\n\n## Tasks\n- [ ] Review daily tasks\n\n## Notes\n\n"


@dataclass(slots=True)
class CategoryStats:
    applied: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass(slots=True)
class SyncReport:
    started_at: float
    finished_at: float | None = None
    toggles: CategoryStats = field(default_factory=CategoryStats)
    postpones: CategoryStats = field(default_factory=CategoryStats)
    new_tasks: CategoryStats = field(default_factory=CategoryStats)
    remaining: int = 0
    fatal: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.fatal is None

    def summary(self) -> str:
        def _fmt(name: str, s: CategoryStats) -> str:
            return f"{name}: {s.applied} applied, {s.skipped} skipped, {s.failed} failed"

        return "; ".join(
            [
                _fmt("toggles", self.toggles),
                _fmt("postpones", self.postpones),
                _fmt("new tasks", self.new_tasks),
            ]
        )


# ---- single-line transformations (pure) ----


def toggle_line(line: str, task_id: str = "") -> str:
    m = TASK_LINE_RE.match(line)
    if not m:
        raise MalformedLineError(task_id)
    indent, checkmark, task_text = m.groups()
    new_mark = " " if checkmark == "x" else "x"
    return f"{indent}- [{new_mark}] {task_text}"


def postpone_line(line: str, new_date: str) -> str:
    """
    Replace (or add) the due-date marker on a task line.

    A line ending in the checkbox's closing bracket gets the marker inserted
    before that bracket; otherwise the marker goes after the existing content.
    """
    indent = line[: len(line) - len(line.lstrip())]
    eol = "\r" if line.endswith("\r") else ""
    body = DUE_PAIR_RE.sub("", line, count=1).strip()

    if body.endswith("]"):
        body = f"{body[:-1]} {DUE_MARKER} {new_date}]"
    else:
        body = f"{body} {DUE_MARKER} {new_date}"
    return indent + body + eol


def insert_task(content: str, task_text: str) -> str:
    """
    Insert "- [ ] text" right under the first Tasks heading, or append a new Tasks section.

    The inserted lines use the document's own line ending (CRLF if it has any).
    """
    eol = "\r\n" if "\r\n" in content else "\n"
    new_task = f"- [ ] {task_text}"
    m = TASKS_HEADING_RE.search(content)
    if m:
        return f"{content[: m.end()]}{eol}{new_task}{content[m.end():]}"
    return f"{content}{eol}{eol}## Tasks{eol}{new_task}"


def _is_iso_date(value: str) -> bool:
    # fromisoformat also accepts week dates such as "2024-W02-1"; only YYYY-MM-DD is written.
    if not ISO_DATE_RE.fullmatch(value or ""):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class Synchronizer:
    """
    Reconciles the change log into the document store.

    Not safe to run concurrently with itself or with a publish; callers go
    through core.service, which holds AppState.gate.
    """

    def __init__(
        self,
        store: DocumentStore,
        change_log: JsonChangeLog,
        watermark: SyncWatermark,
        settings: Any,
    ) -> None:
        self._store = store
        self._log = change_log
        self._watermark = watermark
        self._intake_folder = str(getattr(settings, "intake_folder", "") or "").strip().strip("/")

    # ---- document helpers ----

    def _read_lines(self, task_id: str) -> tuple[str, list[str], int]:
        path, line_number = parse_task_id(task_id)
        lines = self._store.read(path).split("\n")
        if line_number >= len(lines):
            raise MalformedLineError(task_id, f"line {line_number} is out of range ({len(lines)} lines)")
        return path, lines, line_number

    # ---- per-entry operations ----

    def toggle_task(self, task_id: str) -> None:
        path, lines, idx = self._read_lines(task_id)
        lines[idx] = toggle_line(lines[idx], task_id)
        self._store.write(path, "\n".join(lines))
        logger.info("Toggled task %s", task_id)

    def postpone_task(self, task_id: str, new_date: str) -> None:
        if not _is_iso_date(new_date):
            raise MalformedLineError(task_id, f"invalid date {new_date!r}")
        path, lines, idx = self._read_lines(task_id)
        lines[idx] = postpone_line(lines[idx], new_date)
        self._store.write(path, "\n".join(lines))
        logger.info("Postponed task %s to %s", task_id, new_date)

    def resolve_intake_document(self, today: date | None = None) -> str:
        """
        Today's intake document: "<intake_folder>/<YYYY-MM-DD>.md".

        Created from the daily template when missing. If creation fails, the most
        recently modified document in the intake folder is used instead.
        """
        date_string = (today or date.today()).isoformat()
        path = f"{self._intake_folder}/{date_string}.md" if self._intake_folder else f"{date_string}.md"

        if self._store.exists(path):
            return path

        try:
            return self._store.create(path, daily_note_template(date_string)) or path
        except Exception as e:
            logger.error("Failed to create intake document %s: %s", path, e)

        prefix = f"{self._intake_folder}/" if self._intake_folder else ""
        candidates: list[tuple[float, str]] = []
        for doc in self._store.list_documents():
            if not doc.startswith(prefix):
                continue
            try:
                candidates.append((self._store.modified_time(doc), doc))
            except DocumentNotFoundError:
                continue

        if not candidates:
            raise ResolutionExhaustedError(
                f"No intake document for new tasks: could not create {path} "
                f"and no documents exist in {self._intake_folder or 'the vault root'!r}"
            )

        candidates.sort(reverse=True)
        fallback = candidates[0][1]
        logger.warning("Adding new tasks to fallback document %s", fallback)
        return fallback

    def add_task(self, path: str, task_text: str) -> None:
        content = self._store.read(path)
        self._store.write(path, insert_task(content, task_text))
        logger.info("Added new task to %s", path)

    # ---- the pass ----

    def sync(self, *, today: date | None = None, now_ts: float | None = None) -> SyncReport:
        report = SyncReport(started_at=time.time())

        batch = self._log.claim()
        if batch is None:
            logger.info("No pending changes")
        else:
            changes = batch.changes()
            toggles = [c for c in changes if isinstance(c, Toggle)]
            postpones = [c for c in changes if isinstance(c, Postpone)]
            new_tasks = [c for c in changes if isinstance(c, NewTask)]

            for change in toggles:
                self._apply(change, report.toggles, lambda c=change: self.toggle_task(c.task_id))

            for change in postpones:
                self._apply(change, report.postpones, lambda c=change: self.postpone_task(c.task_id, c.new_date))

            if new_tasks:
                try:
                    destination = self.resolve_intake_document(today)
                except ResolutionExhaustedError as e:
                    logger.error("New task batch failed (%d tasks kept in the change log): %s", len(new_tasks), e)
                    report.fatal = e
                else:
                    for change in new_tasks:
                        self._apply(change, report.new_tasks, lambda c=change: self.add_task(destination, c.text))

            report.remaining = self._log.release()

        report.finished_at = time.time()

        if report.fatal is not None:
            raise SyncError(f"Task sync failed: {report.fatal}", report) from report.fatal

        self._watermark.advance(now_ts)
        logger.info("Task sync completed (%s)", report.summary())
        return report

    def _apply(self, change: Toggle | Postpone | NewTask, stats: CategoryStats, action: Callable[[], None]) -> None:
        try:
            action()
            stats.applied += 1
        except (DocumentNotFoundError, MalformedLineError, ValueError) as e:
            logger.warning("Skipping %s: %s", describe_change(change), e)
            stats.skipped += 1
        except Exception:
            logger.exception("Failed to apply %s", describe_change(change))
            stats.failed += 1
        self._log.acknowledge(change)

    # ---- supplementary queries ----

    def find_modified_documents(self, since: float | None = None) -> list[str]:
        """Documents with tasks modified after `since` (defaults to the watermark)."""
        threshold = self._watermark.load() if since is None else since
        out: list[str] = []
        for path in self._store.list_documents():
            try:
                if self._store.modified_time(path) <= threshold:
                    continue
                if contains_tasks(self._store.read(path)):
                    out.append(path)
            except DocumentNotFoundError:
                continue
        return out
