from __future__ import annotations

"""
Background Build Workers.

Runs tree builds on daemon threads so that a consumer (a viewer, a CLI
progress display) never blocks on ingestion. Builds communicate with the
consumer only through snapshot messages. Every build request gets a new
generation number; snapshots from superseded generations are discarded
before they reach the consumer.
"""

import itertools
import logging
import queue
import threading
from typing import Any, Callable, Dict, Iterable, Optional

from symboltree.core.pipeline.engine import SnapshotCallback, run_ingest
from symboltree.domain.snapshot_models import TreeSnapshot, create_error_snapshot
from symboltree.infra.network import open_source

logger = logging.getLogger(__name__)

ChunkSource = Callable[[], Iterable[bytes]]


# -----------------------------------------------------------------------------
# BUILD WORKER
# -----------------------------------------------------------------------------

def run_build_task(
        source: ChunkSource,
        config: Dict[str, Any],
        on_snapshot: SnapshotCallback,
        generation: int = 0,
        cancellation_event: Optional[threading.Event] = None,
) -> None:
    """
    Execute one tree build; intended as a thread target.

    Ingest failures arrive as error snapshots from the driver. Anything else
    escaping the build is logged and reported the same way, so the consumer
    always receives a terminal snapshot unless the build was cancelled.

    Args:
        source: Factory returning the byte chunks of the feed.
        config: Raw or partial build configuration.
        on_snapshot: Callback receiving each snapshot.
        generation: Identifier stamped on the build's snapshots.
        cancellation_event: Event flag used to abandon the build.
    """
    try:
        if cancellation_event and cancellation_event.is_set():
            logger.info(f"Build #{generation}: Aborted before start.")
            return

        run_ingest(
            source(),
            config,
            on_snapshot,
            generation=generation,
            cancellation_event=cancellation_event,
        )

    except Exception as e:
        logger.critical(f"Build #{generation}: Critical failure detected: {e}", exc_info=True)
        on_snapshot(create_error_snapshot({}, str(e), 0.0, generation))


# -----------------------------------------------------------------------------
# SUPERVISOR
# -----------------------------------------------------------------------------

class BuildSupervisor:
    """
    Issue builds and deliver their snapshots through a queue.

    Starting a build supersedes the previous one: its cancellation event is
    set and any snapshot it still emits is dropped by generation number.
    """

    def __init__(self) -> None:
        self.snapshots: "queue.Queue[TreeSnapshot]" = queue.Queue()
        self._generations = itertools.count(1)
        self._lock = threading.Lock()
        self._current_generation = 0
        self._current_event: Optional[threading.Event] = None
        self._current_thread: Optional[threading.Thread] = None

    @property
    def current_generation(self) -> int:
        return self._current_generation

    def start(self, source: ChunkSource, config: Dict[str, Any]) -> int:
        """
        Launch a build on a daemon thread.

        Args:
            source: Factory returning the byte chunks of the feed.
            config: Build configuration.

        Returns:
            int: Generation number of the new build.
        """
        with self._lock:
            if self._current_event is not None:
                self._current_event.set()

            generation = next(self._generations)
            event = threading.Event()
            self._current_generation = generation
            self._current_event = event

        thread = threading.Thread(
            target=run_build_task,
            args=(source, config, self._deliver, generation, event),
            name=f"symboltree-build-{generation}",
            daemon=True,
        )
        self._current_thread = thread
        thread.start()
        logger.debug(f"Build #{generation} started.")
        return generation

    def start_location(self, location: str, config: Dict[str, Any]) -> int:
        """Launch a build reading from a local file or an http(s) URL."""
        return self.start(lambda: open_source(location), config)

    def wait_for_final(self, timeout: Optional[float] = None) -> TreeSnapshot:
        """
        Block until the current generation delivers its terminal snapshot.

        Raises:
            queue.Empty: If no terminal snapshot arrives within the timeout.
        """
        while True:
            snapshot = self.snapshots.get(timeout=timeout)
            if snapshot.generation == self._current_generation and snapshot.is_final:
                return snapshot

    def join(self, timeout: Optional[float] = None) -> None:
        if self._current_thread is not None:
            self._current_thread.join(timeout)

    def _deliver(self, snapshot: TreeSnapshot) -> None:
        with self._lock:
            stale = snapshot.generation != self._current_generation
        if stale:
            logger.debug(f"Dropping stale snapshot from build #{snapshot.generation}.")
            return
        self.snapshots.put(snapshot)
