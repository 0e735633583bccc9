"""
Unit tests for the serialized snapshot writer.
"""
import threading
from unittest.mock import MagicMock

import pytest

from website.errors import SnapshotWriteError
from website.snapshot_sink import SnapshotSink
from website.snapshot_writer import SnapshotWriter


class TestSnapshotWriter:
    """Test suite for SnapshotWriter."""

    @pytest.fixture
    def sink(self):
        """Create a mock sink."""
        return MagicMock(spec=SnapshotSink)

    @pytest.fixture
    def writer(self, sink):
        """Create a writer with no retry delay."""
        writer = SnapshotWriter(sink, retries=2, retry_delay=0)
        yield writer
        writer.close(timeout=5)

    def test_submit_writes_snapshot(self, writer, sink):
        """Test that a submitted snapshot reaches the sink."""
        writer.submit({"1": {"title": "A"}}).result(timeout=5)
        sink.save.assert_called_once_with({"1": {"title": "A"}})

    def test_writes_in_submission_order(self, writer, sink):
        """Test that snapshots are written one at a time in order."""
        written = []
        sink.save.side_effect = lambda snapshot: written.append(snapshot["n"])
        futures = [writer.submit({"n": n}) for n in range(20)]
        for future in futures:
            future.result(timeout=5)
        assert written == list(range(20))

    def test_retries_then_succeeds(self, writer, sink):
        """Test that a transient failure is retried."""
        sink.save.side_effect = [SnapshotWriteError("busy"), None]
        writer.submit({}).result(timeout=5)
        assert sink.save.call_count == 2

    def test_reports_failure_after_last_retry(self, writer, sink):
        """Test that the future carries the error once retries are used up."""
        sink.save.side_effect = SnapshotWriteError("disk full")
        future = writer.submit({})
        with pytest.raises(SnapshotWriteError):
            future.result(timeout=5)
        assert sink.save.call_count == 3

    def test_unexpected_error_is_wrapped(self, writer, sink):
        """Test that a non-storage error does not kill the writer thread."""
        sink.save.side_effect = [RuntimeError("boom"), None]
        with pytest.raises(SnapshotWriteError):
            writer.submit({}).result(timeout=5)
        writer.submit({}).result(timeout=5)

    def test_close_drains_pending_writes(self, sink):
        """Test that close waits for queued snapshots."""
        release = threading.Event()
        sink.save.side_effect = lambda snapshot: release.wait(5)
        writer = SnapshotWriter(sink, retries=0)
        futures = [writer.submit({"n": n}) for n in range(3)]
        release.set()
        writer.close(timeout=5)
        assert all(future.done() for future in futures)
        assert sink.save.call_count == 3

    def test_submit_after_close_raises(self, sink):
        """Test that a closed writer refuses new snapshots."""
        writer = SnapshotWriter(sink)
        writer.close(timeout=5)
        with pytest.raises(SnapshotWriteError):
            writer.submit({})
