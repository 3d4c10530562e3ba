from datetime import datetime
from typing import Any, Protocol

from pydantic import BaseModel

from domain.value_objects.embeddable_document import VectorRecord


class VectorSearchHit:
    """Result from a vector similarity search."""

    def __init__(self, score: float, id: str, payload: dict[str, Any] | None = None) -> None:  # noqa: A002
        self.score = score
        self.id = id
        self.payload = payload or {}

    def __repr__(self) -> str:
        return f"VectorSearchHit(score={self.score:.4f}, id={self.id!r})"


class StoreManifest(BaseModel):
    """Describes how a vector store was built; written next to its data."""

    name: str
    model_name: str
    dimensions: int
    distance: str = "cosine"
    record_count: int = 0
    corpus_hash: int | None = None
    """Hash of the corpus the store was built from; None for stores written outside the cache."""
    created_at: datetime


class VectorIndex(Protocol):
    """An opened, queryable vector store.

    Results are always ordered by descending cosine similarity (ties broken by
    id), and a search returns ``min(limit, size)`` hits.
    """

    @property
    def manifest(self) -> StoreManifest:
        ...

    async def size(self) -> int:
        """Number of records in the store."""
        ...

    async def search(self, vector: list[float], limit: int) -> list[VectorSearchHit]:
        """Nearest-neighbor search.

        Raises:
            DimensionMismatchError: If ``vector`` differs from the store width

        """
        ...

    async def close(self) -> None:
        ...


class VectorStoreFactory(Protocol):
    """Port for durable, named vector stores.

    This is a protocol (interface) that abstracts the vector store backend.
    """

    async def open(self, name: str) -> VectorIndex:
        """Open an existing store.

        Raises:
            VectorStoreNotFoundError: If no store was ever written under ``name``
            VectorStoreCorruptError: If the store exists but cannot be read

        """
        ...

    async def create(
        self,
        name: str,
        records: list[VectorRecord],
        model_name: str,
        dimensions: int,
        corpus_hash: int | None = None,
    ) -> VectorIndex:
        """Write a store from scratch, fully replacing any prior store under ``name``.

        The previous store stays intact until the new one is completely written.
        ``corpus_hash`` is recorded in the manifest so a store can be matched
        against its fingerprint.
        """
        ...
