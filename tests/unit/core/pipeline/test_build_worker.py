from __future__ import annotations

"""
Unit tests for the background build worker and its supervisor.

Verifies:
1. Unexpected failures become error snapshots instead of dying silently.
2. Builds run off the caller's thread and deliver through the queue.
3. A newer build supersedes the older one and stale snapshots are dropped.
"""

import queue
import threading
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock

import pytest

from symboltree.core.pipeline.worker import BuildSupervisor, run_build_task
from symboltree.domain.snapshot_models import create_progress_snapshot


def test_task_reports_unexpected_failure() -> None:
    def broken_source():
        raise RuntimeError("disk on fire")

    callback = MagicMock()

    run_build_task(broken_source, {}, callback, generation=3)

    callback.assert_called_once()
    snapshot = callback.call_args[0][0]
    assert snapshot.error == "disk on fire"
    assert snapshot.generation == 3
    assert snapshot.root == {}


def test_task_aborts_when_already_cancelled(sample_feed: bytes) -> None:
    event = threading.Event()
    event.set()
    source = MagicMock(return_value=[sample_feed])
    callback = MagicMock()

    run_build_task(source, {}, callback, cancellation_event=event)

    source.assert_not_called()
    callback.assert_not_called()


def test_supervisor_delivers_final_snapshot(sample_feed: bytes) -> None:
    supervisor = BuildSupervisor()

    generation = supervisor.start(lambda: [sample_feed], {"snapshot_interval": 0})
    final = supervisor.wait_for_final(timeout=5)
    supervisor.join(timeout=5)

    assert generation == 1
    assert final.generation == 1
    assert final.ok
    assert final.root["size"] == 722


def test_new_build_supersedes_running_one(sample_feed: bytes) -> None:
    gate = threading.Event()
    first_started = threading.Event()

    def slow_source() -> Iterator[bytes]:
        first_started.set()
        gate.wait(timeout=5)
        yield sample_feed

    supervisor = BuildSupervisor()
    first = supervisor.start(slow_source, {})
    assert first_started.wait(timeout=5)

    second = supervisor.start(lambda: [sample_feed], {"types": "t"})
    final = supervisor.wait_for_final(timeout=5)
    gate.set()
    supervisor.join(timeout=5)

    assert (first, second) == (1, 2)
    assert final.generation == 2
    assert final.root["size"] == 620
    assert supervisor.current_generation == 2


def test_stale_snapshots_are_dropped() -> None:
    supervisor = BuildSupervisor()
    supervisor._current_generation = 2

    supervisor._deliver(create_progress_snapshot({}, 0.5, generation=1))
    supervisor._deliver(create_progress_snapshot({}, 0.5, generation=2))

    delivered = supervisor.snapshots.get_nowait()
    assert delivered.generation == 2
    with pytest.raises(queue.Empty):
        supervisor.snapshots.get_nowait()


def test_supervisor_builds_from_local_file(tmp_path: Path, sample_feed: bytes) -> None:
    data = tmp_path / "sizes.ndjson"
    data.write_bytes(sample_feed)
    supervisor = BuildSupervisor()

    generation = supervisor.start_location(str(data), {"group_by": "component"})
    final = supervisor.wait_for_final(timeout=5)
    supervisor.join(timeout=5)

    assert final.generation == generation
    assert final.ok
    assert final.root["size"] == 722
    assert {c["short_name"] for c in final.root["children"]} == {"Core", "UI", "(No component)"}


def test_supervisor_reports_missing_file(tmp_path: Path) -> None:
    supervisor = BuildSupervisor()

    supervisor.start_location(str(tmp_path / "absent.ndjson"), {})
    final = supervisor.wait_for_final(timeout=5)

    assert not final.ok
    assert "absent.ndjson" in final.error
