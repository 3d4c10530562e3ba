from typing import Protocol

from domain.value_objects.cache_fingerprint import CacheFingerprint


class FingerprintStore(Protocol):
    """Port for the per-corpus fingerprint files gating vector store reuse."""

    def read(self, name: str) -> CacheFingerprint | None:
        """Return the stored fingerprint, or None if the corpus has none.

        Raises:
            CacheCorruptError: If the fingerprint exists but is unreadable

        """
        ...

    def write(self, name: str, fingerprint: CacheFingerprint) -> None:
        """Overwrite the corpus fingerprint."""
        ...
