from __future__ import annotations

from pathlib import Path

import structlog

from application.ports.fingerprint_store import FingerprintStore
from domain.exceptions import CacheCorruptError
from domain.value_objects.cache_fingerprint import CacheFingerprint
from infrastructure.persistence.json_snapshot_store import write_text_atomic

logger = structlog.get_logger()


class FingerprintFileStore(FingerprintStore):
    """One ``<cache_root>/<name>.hash`` text file per corpus."""

    def __init__(self, cache_root: Path) -> None:
        self.cache_root = cache_root

    def path_for(self, name: str) -> Path:
        return self.cache_root / f"{name}.hash"

    def read(self, name: str) -> CacheFingerprint | None:
        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read fingerprint {path}: {e!s}"
            raise CacheCorruptError(msg) from e

        try:
            return CacheFingerprint.parse(text)
        except ValueError as e:
            msg = f"Malformed fingerprint {path}: {e!s}"
            raise CacheCorruptError(msg) from e

    def write(self, name: str, fingerprint: CacheFingerprint) -> None:
        path = self.path_for(name)
        write_text_atomic(path, fingerprint.to_text())
        logger.debug("fingerprint_written", corpus=name, path=str(path))
