# src/task_relay/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs one command:
- publish / sync: a single pass, exit code 1 on failure,
- run: startup sync plus the periodic sync loop until Ctrl+C,
- list / queue / status: local inspection and producer-side helpers.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..core.service import publish_tasks, sync_tasks
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..sync.sync_scheduler import run_sync_scheduler
from ..tasks.extractor import extract_all
from ..tasks.query import filter_tasks
from ..tasks.task_models import priority_symbol

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-relay",
        description="Publish Markdown checkbox tasks and sync remote edits back.",
    )
    parser.add_argument("--vault", type=Path, help="Vault directory (overrides TASKRELAY_VAULT_DIR)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("publish", help="Render the publish page and push it")
    sub.add_parser("sync", help="Apply pending remote changes once")

    p_run = sub.add_parser("run", help="Sync at startup, then periodically until Ctrl+C")
    p_run.add_argument("--interval", type=float, help="Minutes between syncs (0 = startup only)")

    p_list = sub.add_parser("list", help="List tasks matching a query")
    p_list.add_argument("--query", default="not done", help="Query clauses, one per line (default: 'not done')")

    p_queue = sub.add_parser("queue", help="Append a change to the change log")
    q_sub = p_queue.add_subparsers(dest="change", required=True)
    q_toggle = q_sub.add_parser("toggle", help="Queue a completion toggle")
    q_toggle.add_argument("task_id")
    q_postpone = q_sub.add_parser("postpone", help="Queue a new due date")
    q_postpone.add_argument("task_id")
    q_postpone.add_argument("date", help="YYYY-MM-DD")
    q_add = q_sub.add_parser("add", help="Queue a new task")
    q_add.add_argument("text", nargs="+")

    sub.add_parser("status", help="Show last sync time and pending changes")
    return parser


def _print_tasks(state: AppState, query: str) -> int:
    tasks = filter_tasks(extract_all(state.store), query.replace("\\n", "\n"))
    for t in tasks:
        mark = "x" if t.completed else " "
        meta = " ".join(
            part
            for part in (
                priority_symbol(t.priority),
                f"due {t.due_date}" if t.due_date else "",
                f"scheduled {t.scheduled_date}" if t.scheduled_date else "",
                f"start {t.start_date}" if t.start_date else "",
            )
            if part
        )
        print(f"[{mark}] {t.text}  ({t.id}){'  ' + meta if meta else ''}")
    print(f"{len(tasks)} tasks")
    return 0


def _print_status(state: AppState) -> int:
    last = state.watermark.load()
    when = datetime.fromtimestamp(last).astimezone().strftime("%Y-%m-%d %H:%M:%S") if last else "never"
    pending = state.change_log.peek()
    print(f"Last sync: {when}")
    print(
        f"Pending: {len(pending.toggles)} toggles, "
        f"{len(pending.postpones)} postpones, {len(pending.new_tasks)} new tasks"
    )
    return 0


def _queue(state: AppState, args: argparse.Namespace) -> int:
    log = state.change_log
    if args.change == "toggle":
        log.append_toggle(args.task_id)
    elif args.change == "postpone":
        log.append_postpone(args.task_id, args.date)
    else:
        log.append_new_task(" ".join(args.text))
    print("Queued.")
    return 0


def _run_forever(state: AppState, interval: float | None) -> int:
    try:
        asyncio.run(run_sync_scheduler(state, interval_minutes=interval))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    if args.vault is not None:
        settings = settings.with_overrides(vault_dir=args.vault)

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.debug("Starting %s (%s)", settings.app_name, args.command)

    try:
        state = create_initial_state(settings=settings)
    except (OSError, ValueError) as e:
        logger.error("Startup failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.command == "publish":
        result = asyncio.run(publish_tasks(state))
        print(result.message)
        return 0 if result.ok else 1

    if args.command == "sync":
        result = asyncio.run(sync_tasks(state))
        print(result.message)
        if result.report is not None:
            print(result.report.summary())
        return 0 if result.ok else 1

    if args.command == "run":
        return _run_forever(state, args.interval)

    if args.command == "list":
        return _print_tasks(state, args.query)

    if args.command == "queue":
        return _queue(state, args)

    return _print_status(state)


if __name__ == "__main__":
    sys.exit(main())
