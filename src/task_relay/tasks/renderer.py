# src/task_relay/tasks/renderer.py

from __future__ import annotations

"""
Task rendering.

Turns a filtered task list into a display fragment the remote viewer can act on:
every task carries its id so toggles and postpones can be addressed back to the
source line.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from html import escape

from .query import filter_tasks
from .task_models import DUE_MARKER, SCHEDULED_MARKER, START_MARKER, Priority, TaskRecord, priority_symbol

SHORT_MODE_DIRECTIVE = "short mode"
HIDE_COUNT_DIRECTIVE = "hide task count"
POSTPONE_OFFSETS: tuple[int, ...] = (1, 7)

QUERY_BLOCK_RE = re.compile(r"```tasks\n([\s\S]*?)\n```")


@dataclass(slots=True, frozen=True)
class Badge:
    kind: str  # "due" | "scheduled" | "start" | "priority"
    label: str


@dataclass(slots=True, frozen=True)
class RenderedTask:
    task_id: str
    completed: bool
    text: str
    priority: Priority
    badges: tuple[Badge, ...]
    postpone_offsets: tuple[int, ...] = POSTPONE_OFFSETS


@dataclass(slots=True, frozen=True)
class DisplayFragment:
    items: tuple[RenderedTask, ...]
    short_mode: bool
    show_count: bool

    @property
    def task_count(self) -> int:
        return len(self.items)

    def to_html(self) -> str:
        parts = ['<div class="task-group">']
        if self.show_count:
            parts.append(f'<div class="task-count">{self.task_count} tasks</div>')
        for item in self.items:
            parts.append(_item_html(item, self.short_mode))
        parts.append("</div>")
        return "\n".join(parts)


def _badges(task: TaskRecord) -> tuple[Badge, ...]:
    out: list[Badge] = []
    if task.due_date:
        out.append(Badge("due", f"{DUE_MARKER} {task.due_date}"))
    if task.scheduled_date:
        out.append(Badge("scheduled", f"{SCHEDULED_MARKER} {task.scheduled_date}"))
    if task.start_date:
        out.append(Badge("start", f"{START_MARKER} {task.start_date}"))
    if task.priority != Priority.NONE:
        out.append(Badge("priority", priority_symbol(task.priority)))
    return tuple(out)


_BADGE_CLASSES = {
    "due": "due-date",
    "scheduled": "scheduled-date",
    "start": "start-date",
    "priority": "priority",
}


def _item_html(item: RenderedTask, short_mode: bool) -> str:
    classes = ["task-item"]
    if item.priority != Priority.NONE:
        classes.append(f"priority-{item.priority.value}")
    if item.completed:
        classes.append("completed")

    tid = escape(item.task_id, quote=True)
    # The id is also embedded in a JS string literal inside the attribute.
    js_tid = escape(item.task_id.replace("\\", "\\\\").replace("'", "\\'"), quote=True)
    checked = " checked" if item.completed else ""

    lines = [
        f'<div class="{" ".join(classes)}" data-task-id="{tid}">',
        f'  <input type="checkbox" data-task-id="{tid}"{checked} onchange="toggleTask(\'{js_tid}\')">',
        f'  <span class="task-text">{escape(item.text)}</span>',
    ]

    if not short_mode and item.badges:
        spans = "".join(
            f'<span class="{_BADGE_CLASSES[b.kind]}">{escape(b.label)}</span>' for b in item.badges
        )
        lines.append(f'  <div class="task-metadata">{spans}</div>')

    if item.postpone_offsets:
        buttons = "".join(
            f"<button onclick=\"postponeTask('{js_tid}', {days})\">{_offset_label(days)}</button>"
            for days in item.postpone_offsets
        )
        lines.append(f'  <div class="task-actions">{buttons}</div>')

    lines.append("</div>")
    return "\n".join(lines)


def _offset_label(days: int) -> str:
    if days % 7 == 0:
        return f"+{days // 7}w"
    return f"+{days}d"


def render_tasks(tasks: Sequence[TaskRecord], query_text: str) -> DisplayFragment:
    query_text = query_text or ""
    short_mode = SHORT_MODE_DIRECTIVE in query_text

    items = tuple(
        RenderedTask(
            task_id=t.id,
            completed=t.completed,
            text=t.text,
            priority=t.priority,
            badges=() if short_mode else _badges(t),
        )
        for t in tasks
    )

    return DisplayFragment(
        items=items,
        short_mode=short_mode,
        show_count=HIDE_COUNT_DIRECTIVE not in query_text,
    )


def render_query_blocks(
    page_text: str,
    tasks: Sequence[TaskRecord],
    *,
    today: date | None = None,
) -> str:
    """Replace every ```tasks fenced block in `page_text` with its rendered HTML."""

    def _replace(m: re.Match[str]) -> str:
        query_text = m.group(1)
        selected = filter_tasks(tasks, query_text, today=today)
        return render_tasks(selected, query_text).to_html()

    return QUERY_BLOCK_RE.sub(_replace, page_text or "")
