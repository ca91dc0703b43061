# src/task_relay/errors.py

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sync.synchronizer import SyncReport


class TaskRelayError(RuntimeError):
    """Base class for errors raised by task-relay."""


class DocumentNotFoundError(TaskRelayError, FileNotFoundError):
    """A document (or the change log) does not exist. Non-fatal for sync entries."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document not found: {path}")
        self.path = path


class MalformedLineError(TaskRelayError):
    """The line addressed by a task id no longer matches the checkbox grammar."""

    def __init__(self, task_id: str, reason: str = "line does not match the task grammar") -> None:
        super().__init__(f"{task_id}: {reason}")
        self.task_id = task_id


class ResolutionExhaustedError(TaskRelayError):
    """No intake document could be created or found for new tasks."""


class PublishError(TaskRelayError):
    """The publish transport failed. Does not affect sync state."""


class SyncError(TaskRelayError):
    """A synchronization pass finished with a fatal error; the watermark was not advanced."""

    def __init__(self, message: str, report: SyncReport | None = None) -> None:
        super().__init__(message)
        self.report = report
