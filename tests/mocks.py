"""Mock implementations for testing."""

from __future__ import annotations

import asyncio
import hashlib
import math
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from application.dtos.catalog_dtos import FieldCatalogRow
from application.ports.vector_store import StoreManifest, VectorSearchHit
from domain.exceptions import (
    CacheCorruptError,
    DimensionMismatchError,
    SnapshotCorruptError,
    SnapshotNotFoundError,
    VectorStoreCorruptError,
    VectorStoreNotFoundError,
)
from domain.value_objects.cache_fingerprint import CacheFingerprint
from domain.value_objects.embeddable_document import VectorRecord
from domain.value_objects.example_query import ExampleQuery
from domain.value_objects.field_category import FieldCategory
from domain.value_objects.field_data_type import FieldDataType
from domain.value_objects.field_metadata import FieldMetadata
from domain.value_objects.metadata_snapshot import MetadataSnapshot
from domain.value_objects.text_embedding import TextEmbedding

# ---------------------------------------------------------------------------
# Catalog helpers
# ---------------------------------------------------------------------------


def make_field(
    name: str,
    category: FieldCategory,
    data_type: FieldDataType = FieldDataType.STRING,
    *,
    selectable: bool = True,
    filterable: bool = True,
    sortable: bool = True,
) -> FieldMetadata:
    return FieldMetadata.create(
        name=name,
        category=category,
        data_type=data_type,
        selectable=selectable,
        filterable=filterable,
        sortable=sortable,
    )


# ---------------------------------------------------------------------------
# Embedding helpers
# ---------------------------------------------------------------------------


def hashed_vector(text: str, dims: int = 8) -> list[float]:
    """Deterministic bag-of-words vector: texts sharing words point the same way."""
    vector = [0.01] * dims
    for word in re.findall(r"[a-z0-9]+", text.lower()):
        bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % dims  # noqa: S324
        vector[bucket] += 1.0
    return vector


def make_embedding(text: str = "text", model_name: str = "test-model", dims: int = 8) -> TextEmbedding:
    return TextEmbedding(vector=hashed_vector(text, dims), model_name=model_name, dimensions=dims)


def cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class MockEmbeddingGenerator:
    """Mock implementation of EmbeddingGenerator."""

    def __init__(
        self,
        model_name: str = "test-model",
        dims: int = 8,
        raise_on_call: Exception | None = None,
    ) -> None:
        self.model_name = model_name
        self.dims = dims
        self.raise_on_call = raise_on_call
        self.generate_batch_calls: list[list[str]] = []
        self.generate_text_calls: list[str] = []

    async def generate_text_embedding(self, text: str) -> TextEmbedding:
        if self.raise_on_call:
            raise self.raise_on_call
        self.generate_text_calls.append(text)
        return make_embedding(text, self.model_name, self.dims)

    async def generate_batch_embeddings(self, texts: list[str]) -> list[TextEmbedding]:
        if self.raise_on_call:
            raise self.raise_on_call
        self.generate_batch_calls.append(texts)
        return [make_embedding(text, self.model_name, self.dims) for text in texts]

    async def get_model_info(self) -> dict[str, str | int]:
        return {"model_name": self.model_name, "dimensions": self.dims, "provider": "mock"}


# ---------------------------------------------------------------------------
# Vector store mocks
# ---------------------------------------------------------------------------


class MockVectorIndex:
    """In-memory brute-force cosine index."""

    def __init__(self, manifest: StoreManifest, records: list[VectorRecord]) -> None:
        self._manifest = manifest
        self.records = records
        self.search_calls: list[dict] = []
        self.closed = False

    @property
    def manifest(self) -> StoreManifest:
        return self._manifest

    async def size(self) -> int:
        return len(self.records)

    async def search(self, vector: list[float], limit: int) -> list[VectorSearchHit]:
        if len(vector) != self._manifest.dimensions:
            raise DimensionMismatchError(expected=self._manifest.dimensions, actual=len(vector))
        self.search_calls.append({"limit": limit})
        hits = [
            VectorSearchHit(
                score=cosine(vector, record.vector),
                id=record.id,
                payload={**record.payload, "id": record.id, "description": record.description},
            )
            for record in self.records
        ]
        hits.sort(key=lambda hit: (-hit.score, hit.id))
        return hits[: max(limit, 0)]

    async def close(self) -> None:
        self.closed = True


class MockVectorStoreFactory:
    """Mock implementation of VectorStoreFactory keeping stores in memory."""

    def __init__(self, raise_on_create: Exception | None = None) -> None:
        self.stores: dict[str, tuple[StoreManifest, list[VectorRecord]]] = {}
        self.corrupt: set[str] = set()
        self.raise_on_create = raise_on_create
        self.create_calls: list[dict] = []
        self.open_calls: list[str] = []
        self.opened: list[MockVectorIndex] = []

    async def open(self, name: str) -> MockVectorIndex:
        self.open_calls.append(name)
        if name in self.corrupt:
            msg = f"Vector store {name} is unreadable"
            raise VectorStoreCorruptError(msg)
        if name not in self.stores:
            msg = f"No vector store named {name}"
            raise VectorStoreNotFoundError(msg)
        manifest, records = self.stores[name]
        index = MockVectorIndex(manifest, list(records))
        self.opened.append(index)
        return index

    async def create(
        self,
        name: str,
        records: list[VectorRecord],
        model_name: str,
        dimensions: int,
        corpus_hash: int | None = None,
    ) -> MockVectorIndex:
        self.create_calls.append({"name": name, "count": len(records), "model_name": model_name})
        if self.raise_on_create:
            raise self.raise_on_create
        manifest = StoreManifest(
            name=name,
            model_name=model_name,
            dimensions=dimensions,
            record_count=len(records),
            corpus_hash=corpus_hash,
            created_at=datetime.now(UTC),
        )
        self.stores[name] = (manifest, list(records))
        self.corrupt.discard(name)
        return await self.open(name)


def make_index(
    records: list[VectorRecord],
    model_name: str = "test-model",
    dims: int = 8,
    name: str = "test_corpus",
) -> MockVectorIndex:
    manifest = StoreManifest(
        name=name,
        model_name=model_name,
        dimensions=dims,
        record_count=len(records),
        created_at=datetime.now(UTC),
    )
    return MockVectorIndex(manifest, records)


# ---------------------------------------------------------------------------
# Persistence mocks
# ---------------------------------------------------------------------------


class MockFingerprintStore:
    """Mock implementation of FingerprintStore."""

    def __init__(self) -> None:
        self.fingerprints: dict[str, CacheFingerprint] = {}
        self.corrupt: set[str] = set()
        self.write_calls: list[str] = []
        self.raise_on_write: Exception | None = None

    def read(self, name: str) -> CacheFingerprint | None:
        if name in self.corrupt:
            msg = f"Malformed fingerprint for {name}"
            raise CacheCorruptError(msg)
        return self.fingerprints.get(name)

    def write(self, name: str, fingerprint: CacheFingerprint) -> None:
        self.write_calls.append(name)
        if self.raise_on_write:
            raise self.raise_on_write
        self.corrupt.discard(name)
        self.fingerprints[name] = fingerprint


class MockSnapshotStore:
    """Mock implementation of MetadataSnapshotStore."""

    def __init__(self, snapshot: MetadataSnapshot | None = None, path: Path | None = None) -> None:
        self.snapshots: dict[Path, MetadataSnapshot] = {}
        self.corrupt: set[Path] = set()
        self.save_calls: list[Path] = []
        if snapshot is not None and path is not None:
            self.snapshots[path] = snapshot

    def load(self, path: Path) -> MetadataSnapshot:
        if path in self.corrupt:
            msg = f"Snapshot at {path} cannot be parsed"
            raise SnapshotCorruptError(msg)
        if path not in self.snapshots:
            msg = f"No snapshot at {path}"
            raise SnapshotNotFoundError(msg)
        return self.snapshots[path]

    def save(self, snapshot: MetadataSnapshot, path: Path) -> None:
        self.save_calls.append(path)
        self.corrupt.discard(path)
        self.snapshots[path] = snapshot


class MockExampleQueryRepository:
    """Mock implementation of ExampleQueryRepository."""

    def __init__(
        self,
        examples: list[ExampleQuery] | None = None,
        raise_on_load: Exception | None = None,
    ) -> None:
        self.examples = examples or []
        self.raise_on_load = raise_on_load
        self.load_calls: list[Path] = []

    def load(self, path: Path) -> list[ExampleQuery]:
        self.load_calls.append(path)
        if self.raise_on_load:
            raise self.raise_on_load
        return list(self.examples)


# ---------------------------------------------------------------------------
# Catalog source mock
# ---------------------------------------------------------------------------


class MockFieldCatalogSource:
    """Mock implementation of FieldCatalogSource."""

    def __init__(
        self,
        rows: list[FieldCatalogRow] | None = None,
        raise_on_call: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.rows = rows or []
        self.raise_on_call = raise_on_call
        self.delay = delay
        self.search_calls: list[dict[str, Any]] = []

    async def search_fields(self, query: str, page_size: int) -> list[FieldCatalogRow]:
        self.search_calls.append({"query": query, "page_size": page_size})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raise_on_call:
            raise self.raise_on_call
        return list(self.rows)
