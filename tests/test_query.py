# tests/test_query.py

from __future__ import annotations

from datetime import date

from task_relay.tasks.query import QueryClause, filter_tasks, parse_query
from task_relay.tasks.task_models import Priority, TaskRecord

TODAY = date(2024, 1, 1)


def _task(
    n: int,
    *,
    completed: bool = False,
    priority: Priority = Priority.NONE,
    due: str | None = None,
    scheduled: str | None = None,
    start: str | None = None,
) -> TaskRecord:
    return TaskRecord(
        id=f"notes.md:{n}",
        text=f"task {n}",
        completed=completed,
        priority=priority,
        document_path="notes.md",
        line_number=n,
        due_date=due,
        scheduled_date=scheduled,
        start_date=start,
    )


def _ids(tasks: list[TaskRecord]) -> list[str]:
    return [t.id for t in tasks]


def test_not_done_keeps_open_tasks() -> None:
    done, open_ = _task(0, completed=True), _task(1)

    assert filter_tasks([done, open_], "not done", today=TODAY) == [open_]


def test_done_today_keeps_every_completed_task() -> None:
    tasks = [_task(0, completed=True, due="2020-05-05"), _task(1)]

    assert _ids(filter_tasks(tasks, "done today", today=TODAY)) == ["notes.md:0"]


def test_priority_is_medium() -> None:
    tasks = [_task(0), _task(1, priority=Priority.MEDIUM), _task(2, priority=Priority.HIGH)]

    assert _ids(filter_tasks(tasks, "priority is medium", today=TODAY)) == ["notes.md:1"]


def test_priority_is_above_medium() -> None:
    tasks = [
        _task(0, priority=Priority.MEDIUM),
        _task(1, priority=Priority.HIGH),
        _task(2, priority=Priority.HIGHEST),
        _task(3, priority=Priority.LOW),
    ]

    assert _ids(filter_tasks(tasks, "priority is above medium", today=TODAY)) == ["notes.md:1", "notes.md:2"]


def test_due_within_3_days() -> None:
    tasks = [_task(0, due="2024-01-03"), _task(1, due="2024-01-10"), _task(2), _task(3, due="2024-01-04")]

    assert _ids(filter_tasks(tasks, "due within 3 days", today=TODAY)) == ["notes.md:0", "notes.md:2", "notes.md:3"]


def test_due_after_today_is_permissive_on_missing_dates() -> None:
    tasks = [_task(0, due="2024-01-01"), _task(1, due="2024-01-02"), _task(2), _task(3, due="2023-12-31")]

    assert _ids(filter_tasks(tasks, "due after today", today=TODAY)) == ["notes.md:1", "notes.md:2"]


def test_tomorrow_bound_clauses() -> None:
    tasks = [
        _task(0, due="2024-01-02", start="2024-01-01", scheduled="2023-12-30"),
        _task(1, due="2024-01-03"),
        _task(2, start="2024-01-02"),
        _task(3, scheduled="2024-01-02"),
        _task(4),
    ]

    assert _ids(filter_tasks(tasks, "due on or before tomorrow", today=TODAY)) == [
        "notes.md:0",
        "notes.md:2",
        "notes.md:3",
        "notes.md:4",
    ]
    assert _ids(filter_tasks(tasks, "starts before tomorrow", today=TODAY)) == [
        "notes.md:0",
        "notes.md:1",
        "notes.md:3",
        "notes.md:4",
    ]
    assert _ids(filter_tasks(tasks, "scheduled before tomorrow", today=TODAY)) == [
        "notes.md:0",
        "notes.md:1",
        "notes.md:2",
        "notes.md:4",
    ]


def test_clauses_are_anded_and_directives_ignored() -> None:
    tasks = [
        _task(0, completed=True, priority=Priority.HIGH),
        _task(1, priority=Priority.HIGH, due="2024-01-02"),
        _task(2, priority=Priority.LOW),
        _task(3, priority=Priority.HIGHEST, due="2024-02-01"),
    ]
    query = "Not Done\npriority is above medium\n  due within 3 days  \nshort mode\nhide task count\nsort by nonsense"

    assert _ids(filter_tasks(tasks, query, today=TODAY)) == ["notes.md:1"]


def test_empty_query_keeps_everything() -> None:
    tasks = [_task(0), _task(1, completed=True)]

    assert filter_tasks(tasks, "", today=TODAY) == tasks
    assert filter_tasks(tasks, "short mode", today=TODAY) == tasks


def test_parse_query_preserves_declaration_order() -> None:
    assert parse_query("due within 3 days\nhide task count\nNOT DONE") == [
        QueryClause.DUE_WITHIN_3_DAYS,
        QueryClause.NOT_DONE,
    ]
