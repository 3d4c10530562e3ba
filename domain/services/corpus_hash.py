"""Content hashing of document corpora."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable

from domain.value_objects.embeddable_document import EmbeddableDocument


def compute_corpus_hash(documents: Iterable[EmbeddableDocument], salt: str = "") -> int:
    """Return a 64-bit hash of a corpus' logical content.

    Pure function of document ids, descriptions and payloads: independent of
    document order, file timestamps, process and machine. ``salt`` folds in
    whatever else determines the vectors (embedding model, description
    synthesis version).
    """
    hasher = hashlib.blake2b(digest_size=8)
    hasher.update(salt.encode("utf-8"))

    for document in sorted(documents, key=lambda d: d.id):
        entry = json.dumps(
            [document.id, document.description, document.payload],
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", ":"),
            default=str,
        )
        # Length-prefix so entry boundaries can't be shifted
        encoded = entry.encode("utf-8")
        hasher.update(len(encoded).to_bytes(8, "big"))
        hasher.update(encoded)

    return int.from_bytes(hasher.digest(), "big")
