# src/task_relay/tasks/query.py

from __future__ import annotations

"""
Task query evaluation.

A query is a block of text; every line is one clause. Clauses are matched by
case-insensitive substring against a closed vocabulary of phrases, and a task is
kept only if it passes every recognized clause (AND semantics).

Unrecognized lines ("short mode", "hide task count", ...) are display directives
for the renderer and are ignored here.

Date-bound clauses only apply when the task has that date: a task without a due
date is never dropped by a due-date clause.
"""

from collections.abc import Callable, Iterable
from datetime import date, timedelta
from enum import Enum

from .task_models import Priority, TaskRecord


class QueryClause(str, Enum):
    NOT_DONE = "not done"
    DONE_TODAY = "done today"
    STARTS_BEFORE_TOMORROW = "starts before tomorrow"
    DUE_ON_OR_BEFORE_TOMORROW = "due on or before tomorrow"
    SCHEDULED_BEFORE_TOMORROW = "scheduled before tomorrow"
    PRIORITY_ABOVE_MEDIUM = "priority is above medium"
    PRIORITY_MEDIUM = "priority is medium"
    DUE_AFTER_TODAY = "due after today"
    DUE_WITHIN_3_DAYS = "due within 3 days"


_Predicate = Callable[[TaskRecord, str, str, str], bool]


def _keep(clause: QueryClause) -> _Predicate:
    """Return the keep-predicate for a clause: (task, today, tomorrow, in_three_days) -> bool."""
    if clause is QueryClause.NOT_DONE:
        return lambda t, today, tomorrow, in3: not t.completed
    if clause is QueryClause.DONE_TODAY:
        # No completion date is tracked; "done today" means "done".
        return lambda t, today, tomorrow, in3: t.completed
    if clause is QueryClause.STARTS_BEFORE_TOMORROW:
        return lambda t, today, tomorrow, in3: not (t.start_date and t.start_date >= tomorrow)
    if clause is QueryClause.DUE_ON_OR_BEFORE_TOMORROW:
        return lambda t, today, tomorrow, in3: not (t.due_date and t.due_date > tomorrow)
    if clause is QueryClause.SCHEDULED_BEFORE_TOMORROW:
        return lambda t, today, tomorrow, in3: not (t.scheduled_date and t.scheduled_date >= tomorrow)
    if clause is QueryClause.PRIORITY_ABOVE_MEDIUM:
        return lambda t, today, tomorrow, in3: t.priority in (Priority.HIGH, Priority.HIGHEST)
    if clause is QueryClause.PRIORITY_MEDIUM:
        return lambda t, today, tomorrow, in3: t.priority == Priority.MEDIUM
    if clause is QueryClause.DUE_AFTER_TODAY:
        return lambda t, today, tomorrow, in3: not (t.due_date and t.due_date <= today)
    if clause is QueryClause.DUE_WITHIN_3_DAYS:
        return lambda t, today, tomorrow, in3: not (t.due_date and t.due_date > in3)
    raise ValueError(f"Unhandled clause: {clause!r}")


_PREDICATES: dict[QueryClause, _Predicate] = {c: _keep(c) for c in QueryClause}


def parse_query(query_text: str) -> list[QueryClause]:
    """Recognized clauses in declaration order. A line may carry more than one phrase."""
    clauses: list[QueryClause] = []
    for raw in (query_text or "").lower().split("\n"):
        line = raw.strip()
        if not line:
            continue
        for clause in QueryClause:
            if clause.value in line:
                clauses.append(clause)
    return clauses


def filter_tasks(
    tasks: Iterable[TaskRecord],
    query_text: str,
    *,
    today: date | None = None,
) -> list[TaskRecord]:
    day = today or date.today()
    today_s = day.isoformat()
    tomorrow_s = (day + timedelta(days=1)).isoformat()
    in_three_days_s = (day + timedelta(days=3)).isoformat()

    predicates = [_PREDICATES[c] for c in parse_query(query_text)]

    return [
        task
        for task in tasks
        if all(keep(task, today_s, tomorrow_s, in_three_days_s) for keep in predicates)
    ]
