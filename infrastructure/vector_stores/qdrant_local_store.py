"""Durable named vector stores on Qdrant's embedded (local, on-disk) mode."""

from __future__ import annotations

import shutil
from datetime import UTC, datetime
from pathlib import Path
from uuid import NAMESPACE_URL, uuid4, uuid5

import structlog
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from application.ports.vector_store import (
    StoreManifest,
    VectorIndex,
    VectorSearchHit,
    VectorStoreFactory,
)
from application.services.embedding_cache import validate_corpus_name
from domain.exceptions import (
    DimensionMismatchError,
    VectorStoreCorruptError,
    VectorStoreNotFoundError,
)
from domain.value_objects.embeddable_document import VectorRecord

logger = structlog.get_logger()

COLLECTION_NAME = "records"
MANIFEST_FILENAME = "manifest.json"
QDRANT_DIRNAME = "qdrant"
UPSERT_BATCH_SIZE = 256


def point_id(document_id: str) -> str:
    """Deterministic Qdrant point id for a document id."""
    return str(uuid5(NAMESPACE_URL, f"vector-record:{document_id}"))


class QdrantLocalIndex(VectorIndex):
    """An opened store. Holds the directory lock until ``close``."""

    def __init__(self, client: AsyncQdrantClient, manifest: StoreManifest) -> None:
        self._client = client
        self._manifest = manifest

    @property
    def manifest(self) -> StoreManifest:
        return self._manifest

    async def size(self) -> int:
        result = await self._client.count(collection_name=COLLECTION_NAME, exact=True)
        return result.count

    async def search(self, vector: list[float], limit: int) -> list[VectorSearchHit]:
        if len(vector) != self._manifest.dimensions:
            raise DimensionMismatchError(expected=self._manifest.dimensions, actual=len(vector))
        if limit <= 0:
            return []

        response = await self._client.query_points(
            collection_name=COLLECTION_NAME,
            query=vector,
            limit=limit,
            with_payload=True,
        )

        hits = [
            VectorSearchHit(
                score=point.score,
                id=str((point.payload or {}).get("id", point.id)),
                payload=dict(point.payload or {}),
            )
            for point in response.points
        ]
        # Descending similarity, ties broken by document id
        hits.sort(key=lambda hit: (-hit.score, hit.id))

        logger.debug(
            "vector_store_searched",
            store=self._manifest.name,
            limit=limit,
            results_count=len(hits),
            max_score=hits[0].score if hits else 0.0,
        )
        return hits

    async def close(self) -> None:
        await self._client.close()


class QdrantLocalStoreFactory(VectorStoreFactory):
    """Creates and opens stores under ``<cache_root>/vectors/<name>``.

    Each store directory holds a ``manifest.json`` and an embedded Qdrant
    database with a single cosine collection. A rebuild is written to a
    staging directory and swapped into place once complete, so a failure
    mid-write never touches the previous store.
    """

    def __init__(self, cache_root: Path) -> None:
        self.root = cache_root / "vectors"

    def store_path(self, name: str) -> Path:
        return self.root / validate_corpus_name(name)

    async def open(self, name: str) -> QdrantLocalIndex:
        path = self.store_path(name)
        if not path.is_dir():
            msg = f"No vector store named {name!r} at {path}"
            raise VectorStoreNotFoundError(msg)

        client: AsyncQdrantClient | None = None
        try:
            manifest = StoreManifest.model_validate_json((path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
            if manifest.name != name:
                msg = f"Manifest names store {manifest.name!r}, expected {name!r}"
                raise ValueError(msg)

            client = AsyncQdrantClient(path=str(path / QDRANT_DIRNAME))
            if not await client.collection_exists(COLLECTION_NAME):
                msg = f"Collection {COLLECTION_NAME!r} missing"
                raise ValueError(msg)

            info = await client.get_collection(COLLECTION_NAME)
            vector_size = info.config.params.vectors.size
            if vector_size != manifest.dimensions:
                msg = f"Collection width {vector_size} disagrees with manifest width {manifest.dimensions}"
                raise ValueError(msg)
        except Exception as e:
            if client is not None:
                await client.close()
            msg = f"Vector store {name!r} at {path} is unreadable: {e!s}"
            raise VectorStoreCorruptError(msg) from e

        logger.info(
            "vector_store_opened",
            store=name,
            model_name=manifest.model_name,
            dimensions=manifest.dimensions,
            record_count=manifest.record_count,
        )
        return QdrantLocalIndex(client, manifest)

    async def create(
        self,
        name: str,
        records: list[VectorRecord],
        model_name: str,
        dimensions: int,
        corpus_hash: int | None = None,
    ) -> QdrantLocalIndex:
        final_path = self.store_path(name)
        for record in records:
            if record.dimensions != dimensions:
                raise DimensionMismatchError(expected=dimensions, actual=record.dimensions)

        self.root.mkdir(parents=True, exist_ok=True)
        staging_path = self.root / f".{name}.staging-{uuid4().hex}"

        try:
            await self._write(staging_path, records, dimensions)

            manifest = StoreManifest(
                name=name,
                model_name=model_name,
                dimensions=dimensions,
                record_count=len(records),
                corpus_hash=corpus_hash,
                created_at=datetime.now(UTC),
            )
            (staging_path / MANIFEST_FILENAME).write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
        except BaseException:
            shutil.rmtree(staging_path, ignore_errors=True)
            raise

        self._swap_into_place(staging_path, final_path)

        logger.info(
            "vector_store_created",
            store=name,
            model_name=model_name,
            dimensions=dimensions,
            record_count=len(records),
        )
        return await self.open(name)

    async def _write(self, path: Path, records: list[VectorRecord], dimensions: int) -> None:
        client = AsyncQdrantClient(path=str(path / QDRANT_DIRNAME))
        try:
            await client.create_collection(
                collection_name=COLLECTION_NAME,
                vectors_config=VectorParams(size=dimensions, distance=Distance.COSINE),
            )
            for start in range(0, len(records), UPSERT_BATCH_SIZE):
                batch = records[start : start + UPSERT_BATCH_SIZE]
                await client.upsert(
                    collection_name=COLLECTION_NAME,
                    points=[
                        PointStruct(
                            id=point_id(record.id),
                            vector=record.vector,
                            payload={**record.payload, "id": record.id, "description": record.description},
                        )
                        for record in batch
                    ],
                    wait=True,
                )
        finally:
            await client.close()

    def _swap_into_place(self, staging_path: Path, final_path: Path) -> None:
        trash_path = self.root / f".{final_path.name}.trash-{uuid4().hex}"
        if final_path.exists():
            final_path.rename(trash_path)
        try:
            staging_path.rename(final_path)
        except OSError:
            if trash_path.exists() and not final_path.exists():
                trash_path.rename(final_path)
            shutil.rmtree(staging_path, ignore_errors=True)
            raise
        shutil.rmtree(trash_path, ignore_errors=True)
