"""
Local disk implementation of snapshot storage.

Stores the article map as a JSON file on the local filesystem.
Default location: state/articles.json
"""
import os
from typing import Any, Dict

from website.errors import SnapshotLoadError, SnapshotWriteError
from website.file_utils import load_json_file, save_json_file
from website.snapshot_sink import SnapshotSink


class LocalDiskSnapshotSink(SnapshotSink):
    """
    Local disk implementation of snapshot storage.

    Stores the snapshot in a JSON file on the local filesystem.
    Default location: state/articles.json
    """

    def __init__(self, state_dir: str = "state", filename: str = "articles.json"):
        """
        Initialize local disk snapshot storage.

        Args:
            state_dir: Directory for storing the snapshot file (default: "state")
            filename: Snapshot file name (default: "articles.json")
        """
        self.state_dir = state_dir
        self.filename = filename

    @property
    def filepath(self) -> str:
        """Get the full file path for the snapshot."""
        return os.path.join(self.state_dir, self.filename)

    def exists(self) -> bool:
        """Check whether a snapshot file is present."""
        return os.path.exists(self.filepath)

    def load(self) -> Dict[str, Dict[str, Any]]:
        """
        Read the snapshot file.

        Returns:
            Mapping of identifier string to article dict.

        Raises:
            SnapshotLoadError: If the file is missing or not valid JSON.
        """
        try:
            return load_json_file(self.filepath)
        except (OSError, ValueError) as exc:
            raise SnapshotLoadError(f"Failed to read {self.filepath}: {exc}") from exc

    def save(self, snapshot: Dict[str, Dict[str, Any]]) -> None:
        """
        Overwrite the snapshot file.

        Args:
            snapshot: Mapping of identifier string to article dict.

        Raises:
            SnapshotWriteError: If the file could not be written.
        """
        try:
            save_json_file(self.filepath, snapshot, ensure_dir=True)
        except (OSError, TypeError, ValueError) as exc:
            raise SnapshotWriteError(f"Failed to write {self.filepath}: {exc}") from exc
