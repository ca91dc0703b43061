# src/task_relay/tasks/extractor.py

from __future__ import annotations

"""
Task extraction.

Scans Markdown text line by line and turns checkbox lines into TaskRecords.
Extraction is lossy: lines that do not look like tasks are ignored, never reported.
"""

import logging
import re

from ..core.ports import DocumentStore
from .task_models import (
    DUE_MARKER,
    PRIORITY_SYMBOLS,
    SCHEDULED_MARKER,
    START_MARKER,
    Priority,
    TaskRecord,
    make_task_id,
)

logger = logging.getLogger(__name__)

TASK_LINE_RE = re.compile(r"^(\s*)-\s*\[([ x])\]\s*(.+)$")
HAS_TASK_RE = re.compile(r"^\s*-\s*\[[ x]\]", re.MULTILINE)

_DATE = r"\d{4}-\d{2}-\d{2}"
_PRIORITY_RE = re.compile("[" + "".join(PRIORITY_SYMBOLS) + "]")
_DATE_MARKERS = (DUE_MARKER, SCHEDULED_MARKER, START_MARKER)
_DATE_PAIR_RES = [re.compile(re.escape(m) + r"\s*" + _DATE) for m in _DATE_MARKERS]


def extract_priority(text: str) -> Priority:
    m = _PRIORITY_RE.search(text)
    if not m:
        return Priority.NONE
    return PRIORITY_SYMBOLS.get(m.group(0), Priority.NONE)


def extract_date(text: str, marker: str) -> str | None:
    m = re.search(re.escape(marker) + r"\s*(" + _DATE + ")", text)
    return m.group(1) if m else None


def clean_task_text(text: str) -> str:
    """Strip priority markers and marker+date pairs, then surrounding whitespace."""
    out = _PRIORITY_RE.sub("", text)
    for pair_re in _DATE_PAIR_RES:
        out = pair_re.sub("", out)
    return out.strip()


def contains_tasks(text: str) -> bool:
    return bool(HAS_TASK_RE.search(text or ""))


def extract_tasks(document_text: str, document_path: str) -> list[TaskRecord]:
    tasks: list[TaskRecord] = []

    for index, line in enumerate((document_text or "").split("\n")):
        m = TASK_LINE_RE.match(line)
        if not m:
            continue

        _indent, checkmark, task_text = m.groups()
        tasks.append(
            TaskRecord(
                id=make_task_id(document_path, index),
                text=clean_task_text(task_text),
                completed=checkmark == "x",
                priority=extract_priority(task_text),
                document_path=document_path,
                line_number=index,
                due_date=extract_date(task_text, DUE_MARKER),
                scheduled_date=extract_date(task_text, SCHEDULED_MARKER),
                start_date=extract_date(task_text, START_MARKER),
            )
        )

    return tasks


def extract_all(store: DocumentStore) -> list[TaskRecord]:
    """Extract tasks from every document in the store, in listing order."""
    tasks: list[TaskRecord] = []
    paths = store.list_documents()

    for path in paths:
        try:
            text = store.read(path)
        except Exception:
            logger.exception("Failed to read document %s; skipping", path)
            continue
        tasks.extend(extract_tasks(text, path))

    logger.debug("Extracted %d tasks from %d documents", len(tasks), len(paths))
    return tasks
