# tests/test_change_log.py

from __future__ import annotations

import json
from pathlib import Path

from task_relay.sync.change_log import JsonChangeLog
from task_relay.tasks.task_models import NewTask, Toggle


def test_producer_appends_in_wire_format(change_log: JsonChangeLog) -> None:
    change_log.append_toggle("a.md:1")
    change_log.append_toggle("a.md:1")
    change_log.append_postpone("a.md:2", "2024-01-05")
    change_log.append_postpone("a.md:2", "2024-01-12")
    key = change_log.append_new_task("water plants", key="100")

    data = json.loads(change_log.path.read_text("utf-8"))
    assert key == "100"
    assert data == {
        "toggles": {"a.md:1": True},
        "postpones": {"a.md:2": "2024-01-12"},
        "newTasks": {"100": "water plants"},
    }


def test_missing_log_claims_nothing(change_log: JsonChangeLog) -> None:
    assert change_log.claim() is None
    assert change_log.release() == 0


def test_claim_acknowledge_release_deletes_the_log(change_log: JsonChangeLog) -> None:
    change_log.append_toggle("a.md:1")
    change_log.append_new_task("x", key="1")

    batch = change_log.claim()
    assert batch is not None
    assert not change_log.path.exists()
    assert change_log.claimed_path.exists()

    change_log.acknowledge(Toggle("a.md:1"))
    remaining = json.loads(change_log.claimed_path.read_text("utf-8"))
    assert remaining["toggles"] == {}
    assert remaining["newTasks"] == {"1": "x"}

    change_log.acknowledge(NewTask("x", "1"))
    assert change_log.release() == 0
    assert not change_log.claimed_path.exists()


def test_appends_during_a_claim_go_to_a_fresh_log(change_log: JsonChangeLog) -> None:
    change_log.append_toggle("a.md:1")
    change_log.claim()

    change_log.append_toggle("b.md:2")
    change_log.acknowledge(Toggle("a.md:1"))
    change_log.release()

    fresh = json.loads(change_log.path.read_text("utf-8"))
    assert fresh["toggles"] == {"b.md:2": True}


def test_interrupted_claim_is_resumed_and_merged(tmp_path: Path) -> None:
    path = tmp_path / "pending.json"
    first = JsonChangeLog(path)
    first.append_toggle("a.md:1")
    first.append_new_task("keep me", key="1")
    first.claim()
    first.acknowledge(Toggle("a.md:1"))
    # process "crashes" here: no release()

    second = JsonChangeLog(path)
    second.append_postpone("a.md:3", "2024-02-02")
    batch = second.claim()

    assert batch is not None
    assert batch.toggles == {}
    assert batch.new_tasks == {"1": "keep me"}
    assert batch.postpones == {"a.md:3": "2024-02-02"}
    assert not path.exists()


def test_release_keeps_unacknowledged_entries(change_log: JsonChangeLog) -> None:
    change_log.append_new_task("later", key="9")
    change_log.claim()

    assert change_log.release() == 1
    assert change_log.peek().new_tasks == {"9": "later"}


def test_corrupt_log_is_moved_aside(change_log: JsonChangeLog) -> None:
    change_log.path.parent.mkdir(parents=True, exist_ok=True)
    change_log.path.write_text("{not json", "utf-8")

    batch = change_log.claim()

    assert batch is not None and batch.is_empty()
    assert list(change_log.path.parent.glob("*.corrupt-*"))
    assert change_log.release() == 0
