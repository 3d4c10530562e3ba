from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from application.ports.metadata_snapshot_store import MetadataSnapshotStore
from domain.exceptions import SnapshotCorruptError, SnapshotNotFoundError
from domain.value_objects.metadata_snapshot import MetadataSnapshot

logger = structlog.get_logger()


def write_text_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers see either the old or the new content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(text)
        tmp.flush()
        os.fsync(tmp.fileno())
        temp_file = Path(tmp.name)

    try:
        os.replace(temp_file, path)
    except OSError:
        temp_file.unlink(missing_ok=True)
        raise


class JsonSnapshotStore(MetadataSnapshotStore):
    """Persists catalog snapshots as pretty-printed JSON.

    Snapshots written without a resource index simply omit ``resources``
    and load back with the derived grouping.
    """

    def load(self, path: Path) -> MetadataSnapshot:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            msg = f"No metadata snapshot at {path}"
            raise SnapshotNotFoundError(msg) from e

        try:
            snapshot = MetadataSnapshot.model_validate_json(text)
        except PydanticValidationError as e:
            msg = f"Metadata snapshot at {path} cannot be parsed: {e.error_count()} error(s)"
            raise SnapshotCorruptError(msg) from e

        logger.debug("metadata_snapshot_read", path=str(path), field_count=len(snapshot.fields))
        return snapshot

    def save(self, snapshot: MetadataSnapshot, path: Path) -> None:
        exclude = {"resources"} if snapshot.resources is None else None
        data = snapshot.model_dump(mode="json", exclude=exclude)
        write_text_atomic(path, json.dumps(data, indent=2, ensure_ascii=False))

        logger.info(
            "metadata_snapshot_saved",
            path=str(path),
            field_count=len(snapshot.fields),
            has_resource_index=snapshot.resources is not None,
        )
