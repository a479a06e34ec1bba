from __future__ import annotations

"""
Snapshot Domain Data Models.

Defines the immutable messages handed from the ingest driver to consumers
running in another execution context, together with their factory
functions. Snapshots never hold references to live builder nodes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeSnapshot:
    """
    Point-in-time view of a tree build.

    Attributes:
        root: Detached, JSON-serialisable copy of the tree.
        percent: Completion fraction. 0 before metadata arrives, otherwise
            in (0, 1].
        error: Failure description. A snapshot carrying an error is the last
            one of its build.
        generation: Build request the snapshot belongs to.
    """
    root: Dict[str, Any]
    percent: float
    error: Optional[str] = None
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_final(self) -> bool:
        return self.error is not None or self.percent >= 1


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_progress_snapshot(
        root: Dict[str, Any],
        percent: float,
        generation: int = 0,
) -> TreeSnapshot:
    """Create an intermediate snapshot for a build still in progress."""
    return TreeSnapshot(root=root, percent=percent, generation=generation)


def create_final_snapshot(root: Dict[str, Any], generation: int = 0) -> TreeSnapshot:
    """Create the completion snapshot of a successful build."""
    return TreeSnapshot(root=root, percent=1.0, generation=generation)


def create_error_snapshot(
        root: Dict[str, Any],
        error: str,
        percent: float,
        generation: int = 0,
) -> TreeSnapshot:
    """
    Create the terminal snapshot of a failed build.

    Args:
        root: Tree assembled before the failure.
        error: Human readable failure description.
        percent: Progress reached when the failure happened.
        generation: Build request identifier.

    Returns:
        TreeSnapshot: An immutable error snapshot.
    """
    return TreeSnapshot(root=root, percent=percent, error=error, generation=generation)
