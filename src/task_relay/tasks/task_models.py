# src/task_relay/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

TASK_ID_SEPARATOR = ":"


class Priority(StrEnum):
    """Task priority, derived from a single marker symbol in the task text."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    HIGHEST = "highest"


PRIORITY_SYMBOLS: dict[str, Priority] = {
    "⏫": Priority.HIGHEST,
    "🔺": Priority.HIGH,
    "🔼": Priority.MEDIUM,
    "🔽": Priority.LOW,
}

DUE_MARKER = "📅"
SCHEDULED_MARKER = "⏳"
START_MARKER = "🛫"


def priority_symbol(priority: Priority) -> str:
    for symbol, value in PRIORITY_SYMBOLS.items():
        if value == priority:
            return symbol
    return ""


def make_task_id(document_path: str, line_number: int) -> str:
    return f"{document_path}{TASK_ID_SEPARATOR}{line_number}"


def parse_task_id(task_id: str) -> tuple[str, int]:
    """
    Split "<documentPath>:<lineNumber>" back into its parts.

    The split happens on the last colon, so a path that itself contains a colon
    still resolves. Raises ValueError for ids without a usable line number.
    """
    path, sep, raw_line = (task_id or "").rpartition(TASK_ID_SEPARATOR)
    if not sep or not path:
        raise ValueError(f"Invalid task id: {task_id!r}")
    line_number = int(raw_line)
    if line_number < 0:
        raise ValueError(f"Invalid line number in task id: {task_id!r}")
    return path, line_number


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """
    One task occurrence extracted from a document.

    Notes:
    - id is "<document_path>:<line_number>" and is only stable while the
      document keeps its shape; inserting lines above a task shifts its id.
    - line_number is a 0-based offset into the document's lines.
    """

    id: str
    text: str
    completed: bool
    priority: Priority
    document_path: str
    line_number: int
    due_date: str | None = None
    scheduled_date: str | None = None
    start_date: str | None = None


# ---- pending changes (produced by the remote viewer) ----


@dataclass(slots=True, frozen=True)
class Toggle:
    task_id: str


@dataclass(slots=True, frozen=True)
class Postpone:
    task_id: str
    new_date: str


@dataclass(slots=True, frozen=True)
class NewTask:
    text: str
    key: str = ""


PendingChange = Toggle | Postpone | NewTask


@dataclass(slots=True)
class ChangeBatch:
    """
    In-memory view of one change log document.

    Serialized form:
        {"toggles": {id: true}, "postpones": {id: "YYYY-MM-DD"}, "newTasks": {key: text}}
    """

    toggles: dict[str, bool] = field(default_factory=dict)
    postpones: dict[str, str] = field(default_factory=dict)
    new_tasks: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.toggles or self.postpones or self.new_tasks)

    def __len__(self) -> int:
        return len(self.toggles) + len(self.postpones) + len(self.new_tasks)

    def changes(self) -> list[PendingChange]:
        out: list[PendingChange] = [Toggle(task_id) for task_id in self.toggles]
        out.extend(Postpone(task_id, new_date) for task_id, new_date in self.postpones.items())
        out.extend(NewTask(text, key) for key, text in self.new_tasks.items())
        return out

    def merge(self, other: ChangeBatch) -> None:
        """Fold `other` into this batch; later entries win for the same key."""
        self.toggles.update(other.toggles)
        self.postpones.update(other.postpones)
        self.new_tasks.update(other.new_tasks)

    def discard(self, change: PendingChange) -> None:
        if isinstance(change, Toggle):
            self.toggles.pop(change.task_id, None)
        elif isinstance(change, Postpone):
            self.postpones.pop(change.task_id, None)
        elif isinstance(change, NewTask):
            self.new_tasks.pop(change.key, None)

    def to_json(self) -> dict[str, dict[str, object]]:
        return {
            "toggles": dict(self.toggles),
            "postpones": dict(self.postpones),
            "newTasks": dict(self.new_tasks),
        }

    @classmethod
    def from_json(cls, data: object) -> ChangeBatch:
        """Build a batch from decoded JSON. Wrongly typed entries are dropped."""
        batch = cls()
        if not isinstance(data, dict):
            return batch

        toggles = data.get("toggles")
        if isinstance(toggles, dict):
            for task_id, flag in toggles.items():
                if isinstance(task_id, str) and task_id and flag:
                    batch.toggles[task_id] = True

        postpones = data.get("postpones")
        if isinstance(postpones, dict):
            for task_id, new_date in postpones.items():
                if isinstance(task_id, str) and task_id and isinstance(new_date, str) and new_date.strip():
                    batch.postpones[task_id] = new_date.strip()

        new_tasks = data.get("newTasks")
        if isinstance(new_tasks, dict):
            for key, text in new_tasks.items():
                if isinstance(text, str) and text.strip():
                    batch.new_tasks[str(key)] = text.strip()

        return batch
