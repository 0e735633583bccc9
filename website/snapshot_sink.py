"""
Abstract interface for article snapshot storage.

A snapshot is the whole article map serialized as one JSON object keyed by
stringified identifier. Every write replaces the previous snapshot.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class SnapshotSink(ABC):
    """Abstract base class for snapshot storage backends."""

    @abstractmethod
    def load(self) -> Dict[str, Dict[str, Any]]:
        """
        Read the full snapshot.

        Returns:
            Mapping of identifier string to article dict.

        Raises:
            SnapshotLoadError: If the snapshot is missing or unreadable.
        """

    @abstractmethod
    def save(self, snapshot: Dict[str, Dict[str, Any]]) -> None:
        """
        Overwrite the stored snapshot.

        Args:
            snapshot: Mapping of identifier string to article dict.

        Raises:
            SnapshotWriteError: If the snapshot could not be written.
        """
