from __future__ import annotations

"""
Streaming Ingest Driver.

Coordinates a single tree build:
1. Decodes the byte stream into newline-delimited JSON records.
2. Consumes the first record as metadata (grand total, component names).
3. Feeds every following record to the tree builder.
4. Emits progress snapshots on a wall-clock interval while streaming.
5. Finalizes the tree and emits the completion snapshot, or a single
   error snapshot if the stream fails.

All work happens sequentially on the caller's thread. Consumers only ever
receive detached TreeSnapshot copies.
"""

import enum
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional

from symboltree.core.analysis.grouping import ComponentTable, create_builder
from symboltree.core.analysis.tree_builder import tree_to_dict
from symboltree.core.pipeline.ndjson import iter_ndjson
from symboltree.core.pipeline.validator import validate_config
from symboltree.domain.constants import (
    DEFAULT_SNAPSHOT_INTERVAL,
    KEY_FILE_SYMBOLS,
    META_COMPONENTS,
    META_TOTAL,
    MIN_PROGRESS,
)
from symboltree.domain.errors import IngestError, MalformedRecordError
from symboltree.domain.snapshot_models import (
    TreeSnapshot,
    create_error_snapshot,
    create_final_snapshot,
    create_progress_snapshot,
)
from symboltree.infra.network import open_source

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[TreeSnapshot], None]


class IngestState(enum.Enum):
    AWAITING_META = "awaiting_meta"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


# -----------------------------------------------------------------------------
# DRIVER
# -----------------------------------------------------------------------------

class IngestDriver:
    """
    Drive one tree build from a byte stream.

    A driver is single-use: create a new one (and so a new builder) whenever
    the grouping key, filter or separator changes.
    """

    def __init__(
            self,
            config: Dict[str, Any],
            on_snapshot: Optional[SnapshotCallback] = None,
            *,
            generation: int = 0,
            clock: Callable[[], float] = time.monotonic,
            cancellation_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Args:
            config: Clean build configuration.
            on_snapshot: Receives every snapshot emitted by the build.
            generation: Identifier stamped on emitted snapshots.
            clock: Monotonic time source driving the snapshot interval.
            cancellation_event: Advisory stop flag, checked between records.
        """
        self.components = ComponentTable()
        self.builder = create_builder(config, self.components)
        self.state = IngestState.AWAITING_META
        self.meta: Optional[Dict[str, Any]] = None
        self.entries_seen = 0

        self._on_snapshot = on_snapshot
        self._generation = generation
        self._clock = clock
        self._cancellation_event = cancellation_event
        self._interval = float(config.get("snapshot_interval", DEFAULT_SNAPSHOT_INTERVAL))
        self._total: float = 0

    @property
    def percent(self) -> float:
        """
        Completion fraction of the running build.

        0 is reserved for "metadata not received yet". Afterwards the value
        is the share of the grand total attached so far, floored at
        MIN_PROGRESS and capped at 1.
        """
        if self.meta is None:
            return 0.0
        if self._total <= 0:
            return MIN_PROGRESS
        return min(max(self.builder.root_node.size / self._total, MIN_PROGRESS), 1.0)

    def run(self, chunks: Iterable[bytes]) -> Optional[TreeSnapshot]:
        """
        Consume the whole stream.

        Args:
            chunks: Byte chunks of the data feed.

        Returns:
            Optional[TreeSnapshot]: The terminal snapshot (completion or
            error), or None if the build was cancelled.
        """
        logger.info("Ingest started.")
        last_emit = self._clock()

        try:
            for record in iter_ndjson(chunks):
                if self._is_cancelled():
                    logger.info("Ingest cancelled. Remaining records discarded.")
                    return None

                if self.state is IngestState.AWAITING_META:
                    self._consume_meta(record)
                    self.state = IngestState.STREAMING
                    self._emit_progress()
                    last_emit = self._clock()
                    continue

                self._consume_entry(record)

                now = self._clock()
                if self._interval > 0 and now - last_emit >= self._interval:
                    self._emit_progress()
                    last_emit = now

        except IngestError as e:
            return self._fail(str(e))
        except OSError as e:
            return self._fail(f"Data stream failed: {e}")

        if self._is_cancelled():
            return None
        if self.state is IngestState.AWAITING_META:
            return self._fail("Data feed is empty: no metadata record found.")

        self.state = IngestState.COMPLETE
        root = self.builder.build()
        logger.info(f"Ingest complete: {self.entries_seen} file entries, total size {root.size:,}.")

        snapshot = create_final_snapshot(tree_to_dict(root), self._generation)
        self._post(snapshot)
        return snapshot

    # -------------------------------------------------------------------------
    # Record handling
    # -------------------------------------------------------------------------

    def _consume_meta(self, record: Any) -> None:
        if not isinstance(record, dict):
            raise MalformedRecordError("Metadata record must be a JSON object.", 1)

        total = record.get(META_TOTAL, 0)
        if isinstance(total, bool) or not isinstance(total, (int, float)):
            raise MalformedRecordError(f"Metadata 'total' must be a number, got {total!r}.", 1)

        components = record.get(META_COMPONENTS) or []
        if not isinstance(components, list):
            raise MalformedRecordError("Metadata 'components' must be a list.", 1)

        self.meta = record
        self._total = total
        self.components.load(components)
        logger.debug(f"Metadata received: total={total}, components={len(components)}")

    def _consume_entry(self, record: Any) -> None:
        if not isinstance(record, dict):
            raise MalformedRecordError(f"File entry #{self.entries_seen + 1} is not a JSON object.")
        if not isinstance(record.get(KEY_FILE_SYMBOLS, []), list):
            raise MalformedRecordError(f"File entry #{self.entries_seen + 1} has no symbol list.")

        try:
            self.builder.add_file_entry(record)
        except (AttributeError, TypeError) as e:
            raise MalformedRecordError(
                f"File entry #{self.entries_seen + 1} has malformed symbols: {e}"
            ) from e
        self.entries_seen += 1

    # -------------------------------------------------------------------------
    # Snapshot emission
    # -------------------------------------------------------------------------

    def _emit_progress(self) -> None:
        snapshot = create_progress_snapshot(
            tree_to_dict(self.builder.root_node), self.percent, self._generation
        )
        logger.debug(f"Progress snapshot: {snapshot.percent:.1%}")
        self._post(snapshot)

    def _fail(self, message: str) -> Optional[TreeSnapshot]:
        logger.error(f"Ingest failed: {message}")
        self.state = IngestState.FAILED
        if self._is_cancelled():
            return None

        root = self.builder.build()
        snapshot = create_error_snapshot(tree_to_dict(root), message, self.percent, self._generation)
        self._post(snapshot)
        return snapshot

    def _post(self, snapshot: TreeSnapshot) -> None:
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)

    def _is_cancelled(self) -> bool:
        return self._cancellation_event is not None and self._cancellation_event.is_set()


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def run_ingest(
        chunks: Iterable[bytes],
        config: Optional[Dict[str, Any]] = None,
        on_snapshot: Optional[SnapshotCallback] = None,
        **driver_options: Any,
) -> Optional[TreeSnapshot]:
    """
    Validate a configuration and build a tree from a byte stream.

    Args:
        chunks: Byte chunks of the data feed.
        config: Raw or partial configuration.
        on_snapshot: Snapshot consumer.
        **driver_options: Forwarded to IngestDriver (generation, clock,
            cancellation_event).

    Returns:
        Optional[TreeSnapshot]: Terminal snapshot, None if cancelled.
    """
    cfg, warnings = validate_config(config or {}, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    driver = IngestDriver(cfg, on_snapshot, **driver_options)
    return driver.run(chunks)


def build_from_location(
        location: str,
        config: Optional[Dict[str, Any]] = None,
        on_snapshot: Optional[SnapshotCallback] = None,
        **driver_options: Any,
) -> Optional[TreeSnapshot]:
    """Build a tree from a local data file or an http(s) URL."""
    logger.info(f"Loading data from: {location}")
    return run_ingest(open_source(location), config, on_snapshot, **driver_options)
