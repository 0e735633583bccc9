"""
Single writer thread that serializes snapshot writes.

Snapshots are submitted in the order the store mutates, and written one at a
time in that order, so the file always ends up holding the latest map.
"""
import logging
import queue
import threading
import time
from concurrent.futures import Future
from typing import Any, Dict, Optional, Tuple

from website.errors import SnapshotWriteError
from website.snapshot_sink import SnapshotSink

logger = logging.getLogger(__name__)

_STOP = object()


class SnapshotWriter:
    """Background writer fed through a queue."""

    def __init__(self, sink: SnapshotSink, retries: int = 2, retry_delay: float = 0.1):
        """
        Initialize and start the writer thread.

        Args:
            sink: Storage backend receiving the snapshots
            retries: Extra attempts after a failed write (default: 2)
            retry_delay: Seconds to wait between attempts (default: 0.1)
        """
        self.sink = sink
        self.retries = max(0, retries)
        self.retry_delay = retry_delay
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._closed = False
        self._thread = threading.Thread(
            target=self._run, name="snapshot-writer", daemon=True
        )
        self._thread.start()

    def submit(self, snapshot: Dict[str, Dict[str, Any]]) -> Future:
        """
        Queue a snapshot for writing.

        Args:
            snapshot: Full article map in snapshot representation

        Returns:
            Future resolved once the write succeeded, or holding the
            SnapshotWriteError of the last failed attempt

        Raises:
            SnapshotWriteError: If the writer is closed
        """
        if self._closed:
            raise SnapshotWriteError("Snapshot writer is closed")
        future: Future = Future()
        self._queue.put((snapshot, future))
        return future

    def close(self, timeout: Optional[float] = None) -> None:
        """Finish pending writes and stop the writer thread."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            snapshot, future = item  # type: Tuple[Dict[str, Dict[str, Any]], Future]
            try:
                self._write_with_retries(snapshot)
            except SnapshotWriteError as exc:
                future.set_exception(exc)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.exception("Unexpected error while writing snapshot")
                future.set_exception(SnapshotWriteError(str(exc)))
            else:
                future.set_result(None)

    def _write_with_retries(self, snapshot: Dict[str, Dict[str, Any]]) -> None:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.sink.save(snapshot)
                return
            except SnapshotWriteError as exc:
                if attempt == attempts:
                    logger.error("Snapshot write failed after %d attempt(s): %s", attempts, exc)
                    raise
                logger.warning("Snapshot write attempt %d/%d failed: %s", attempt, attempts, exc)
                time.sleep(self.retry_delay)
