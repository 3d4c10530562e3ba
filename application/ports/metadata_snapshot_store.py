from pathlib import Path
from typing import Protocol

from domain.value_objects.metadata_snapshot import MetadataSnapshot


class MetadataSnapshotStore(Protocol):
    """Port for persisting catalog snapshots."""

    def load(self, path: Path) -> MetadataSnapshot:
        """Read a snapshot.

        Raises:
            SnapshotNotFoundError: If nothing exists at ``path``
            SnapshotCorruptError: If the file exists but cannot be parsed

        """
        ...

    def save(self, snapshot: MetadataSnapshot, path: Path) -> None:
        """Persist a snapshot, replacing any previous one at ``path``."""
        ...
