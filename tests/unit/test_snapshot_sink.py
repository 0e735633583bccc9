"""
Unit tests for snapshot storage and JSON file helpers.
"""
import json
import os

import pytest

from tests.unit.test_storage_base import BaseLocalDiskStorageTests


class TestLocalDiskSnapshotSink(BaseLocalDiskStorageTests):
    """Test suite for LocalDiskSnapshotSink."""

    @pytest.fixture
    def sink(self, temp_state_dir):
        """Create a LocalDiskSnapshotSink instance."""
        from website.local_disk_snapshot_sink import LocalDiskSnapshotSink
        return LocalDiskSnapshotSink(state_dir=temp_state_dir)

    def test_implements_interface(self, sink):
        """Test that LocalDiskSnapshotSink implements SnapshotSink."""
        from website.snapshot_sink import SnapshotSink
        assert isinstance(sink, SnapshotSink)

    def test_default_filepath(self, sink, temp_state_dir):
        """Test that the snapshot lives at state_dir/articles.json."""
        assert sink.filepath == os.path.join(temp_state_dir, "articles.json")

    def test_load_missing_file_raises(self, sink):
        """Test that a missing snapshot is a load error."""
        from website.errors import SnapshotLoadError
        assert not sink.exists()
        with pytest.raises(SnapshotLoadError):
            sink.load()

    def test_load_corrupt_file_raises(self, sink):
        """Test that invalid JSON is a load error."""
        from website.errors import SnapshotLoadError
        with open(sink.filepath, "w") as f:
            f.write("{not json")
        with pytest.raises(SnapshotLoadError):
            sink.load()

    def test_load_non_object_raises(self, sink):
        """Test that a JSON list is a load error."""
        from website.errors import SnapshotLoadError
        with open(sink.filepath, "w") as f:
            json.dump([1, 2], f)
        with pytest.raises(SnapshotLoadError):
            sink.load()

    def test_save_then_load(self, sink):
        """Test that a saved snapshot loads back unchanged."""
        snapshot = {"1": {"title": "A", "intro": "i", "content": ["p1"], "image_path": "x"}}
        sink.save(snapshot)
        assert sink.load() == snapshot

    def test_save_overwrites_previous_snapshot(self, sink):
        """Test that each save replaces the whole file."""
        sink.save({"1": {"title": "A"}})
        sink.save({"2": {"title": "B"}})
        assert sink.load() == {"2": {"title": "B"}}

    def test_save_is_pretty_printed(self, sink):
        """Test that the snapshot is indented JSON."""
        sink.save({"1": {"title": "A"}})
        with open(sink.filepath) as f:
            assert f.read().startswith('{\n  "1"')

    def test_save_creates_state_dir(self, temp_state_dir):
        """Test that a missing state directory is created on save."""
        from website.local_disk_snapshot_sink import LocalDiskSnapshotSink
        sink = LocalDiskSnapshotSink(state_dir=os.path.join(temp_state_dir, "nested"))
        sink.save({})
        assert sink.exists()

    def test_save_leaves_no_temp_files(self, sink, temp_state_dir):
        """Test that only the snapshot file remains after saving."""
        sink.save({"1": {"title": "A"}})
        assert os.listdir(temp_state_dir) == ["articles.json"]

    def test_unserializable_snapshot_raises_write_error(self, sink):
        """Test that a failed save is reported as SnapshotWriteError."""
        from website.errors import SnapshotWriteError
        sink.save({"1": {"title": "A"}})
        with pytest.raises(SnapshotWriteError):
            sink.save({"1": {"title": object()}})
        # The previous snapshot survives a failed write.
        assert sink.load() == {"1": {"title": "A"}}
