from __future__ import annotations

"""
Unit tests for the snapshot data models and their factories.
"""

import dataclasses

import pytest

from symboltree.domain.snapshot_models import (
    create_error_snapshot,
    create_final_snapshot,
    create_progress_snapshot,
)


def test_progress_snapshot_is_not_final() -> None:
    snapshot = create_progress_snapshot({"size": 1}, 0.4, generation=2)

    assert snapshot.ok
    assert not snapshot.is_final
    assert snapshot.generation == 2


def test_final_snapshot_is_complete() -> None:
    snapshot = create_final_snapshot({"size": 1})

    assert snapshot.ok
    assert snapshot.is_final
    assert snapshot.percent == 1.0


def test_error_snapshot_is_terminal_at_any_percent() -> None:
    snapshot = create_error_snapshot({}, "boom", 0.3, generation=5)

    assert not snapshot.ok
    assert snapshot.is_final
    assert snapshot.percent == 0.3
    assert snapshot.error == "boom"


def test_snapshots_are_immutable() -> None:
    snapshot = create_progress_snapshot({}, 0.1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.percent = 0.9  # type: ignore[misc]
