from __future__ import annotations

from pydantic import BaseModel, Field

SCHEMA_VERSION = 1
"""Version tag of the on-disk vector store layout.

Bumping it invalidates every existing fingerprint regardless of hash equality.
"""

MAX_CORPUS_HASH = 2**64 - 1


class CacheFingerprint(BaseModel):
    """(schema version, corpus hash) pair gating reuse of a persisted vector store."""

    schema_version: int = Field(..., ge=0)
    corpus_hash: int = Field(..., ge=0, le=MAX_CORPUS_HASH)

    model_config = {"frozen": True}

    def to_text(self) -> str:
        """Serialize as two lines: ``v<schema_version>`` then the decimal hash."""
        return f"v{self.schema_version}\n{self.corpus_hash}"

    @classmethod
    def parse(cls, text: str) -> CacheFingerprint:
        """Parse the two-line fingerprint format.

        Raises:
            ValueError: If the text is not a well-formed fingerprint.

        """
        lines = text.splitlines()
        if len(lines) < 2 or not lines[0].startswith("v"):  # noqa: PLR2004
            msg = "Fingerprint must contain a 'v<version>' line and a hash line"
            raise ValueError(msg)
        return cls(schema_version=int(lines[0][1:]), corpus_hash=int(lines[1].strip()))

    def matches(self, corpus_hash: int, schema_version: int = SCHEMA_VERSION) -> bool:
        return self.schema_version == schema_version and self.corpus_hash == corpus_hash
