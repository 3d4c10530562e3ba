"""Content-addressed gate in front of expensive corpus re-embedding."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from enum import Enum

import structlog

from application.ports.embedding_generator import EmbeddingGenerator
from application.ports.fingerprint_store import FingerprintStore
from application.ports.vector_store import VectorIndex, VectorStoreFactory
from domain.exceptions import (
    CacheCorruptError,
    DimensionMismatchError,
    EmbeddingModelMismatchError,
    ValidationError,
    VectorStoreNotFoundError,
)
from domain.services.corpus_hash import compute_corpus_hash
from domain.value_objects.cache_fingerprint import SCHEMA_VERSION, CacheFingerprint
from domain.value_objects.embeddable_document import EmbeddableDocument, VectorRecord
from domain.value_objects.text_embedding import TextEmbedding

logger = structlog.get_logger()

_CORPUS_NAME = re.compile(r"^[a-z0-9_]+$")


class StaleReason(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    VERSION_MISMATCH = "VERSION_MISMATCH"
    HASH_MISMATCH = "HASH_MISMATCH"
    CORRUPT = "CORRUPT"


@dataclass(frozen=True)
class Fresh:
    """The persisted store matches the corpus and is already open."""

    store: VectorIndex


@dataclass(frozen=True)
class Stale:
    """The persisted store cannot be reused; the whole corpus must be rebuilt."""

    reason: StaleReason


@dataclass(frozen=True)
class CorpusIndex:
    index: VectorIndex
    corpus_hash: int
    rebuilt: bool


def validate_corpus_name(name: str) -> str:
    if not _CORPUS_NAME.match(name):
        msg = f"Corpus name must match [a-z0-9_]+, got {name!r}"
        raise ValidationError(msg)
    return name


class ContentAddressedEmbeddingCache:
    """Decides whether a named corpus' vector store can be reused.

    Each corpus name owns one fingerprint and one store. Any doubt about the
    persisted pair (missing, other schema version, other hash, unreadable)
    yields ``Stale`` and the caller rebuilds everything; there is no partial
    re-embedding.
    """

    def __init__(
        self,
        fingerprint_store: FingerprintStore,
        vector_store_factory: VectorStoreFactory,
        schema_version: int = SCHEMA_VERSION,
    ) -> None:
        self.fingerprint_store = fingerprint_store
        self.vector_store_factory = vector_store_factory
        self.schema_version = schema_version

    async def check(self, name: str, corpus_hash: int) -> Fresh | Stale:
        """Return ``Fresh(store)`` only if fingerprint and store both match ``corpus_hash``."""
        validate_corpus_name(name)

        try:
            fingerprint = self.fingerprint_store.read(name)
        except CacheCorruptError as e:
            logger.warning("embedding_cache_fingerprint_corrupt", corpus=name, error=str(e))
            return Stale(StaleReason.CORRUPT)

        if fingerprint is None:
            logger.info("embedding_cache_missing", corpus=name)
            return Stale(StaleReason.NOT_FOUND)

        if fingerprint.schema_version != self.schema_version:
            logger.info(
                "embedding_cache_schema_mismatch",
                corpus=name,
                cached_version=fingerprint.schema_version,
                current_version=self.schema_version,
            )
            return Stale(StaleReason.VERSION_MISMATCH)

        if fingerprint.corpus_hash != corpus_hash:
            logger.info(
                "embedding_cache_stale",
                corpus=name,
                cached_hash=fingerprint.corpus_hash,
                current_hash=corpus_hash,
            )
            return Stale(StaleReason.HASH_MISMATCH)

        try:
            store = await self.vector_store_factory.open(name)
        except VectorStoreNotFoundError:
            logger.info("embedding_cache_store_missing", corpus=name)
            return Stale(StaleReason.NOT_FOUND)
        except CacheCorruptError as e:
            logger.warning("embedding_cache_store_corrupt", corpus=name, error=str(e))
            return Stale(StaleReason.CORRUPT)

        if store.manifest.corpus_hash != fingerprint.corpus_hash:
            await store.close()
            logger.warning(
                "embedding_cache_store_fingerprint_mismatch",
                corpus=name,
                fingerprint_hash=fingerprint.corpus_hash,
                store_hash=store.manifest.corpus_hash,
            )
            return Stale(StaleReason.CORRUPT)

        logger.info("embedding_cache_fresh", corpus=name, corpus_hash=corpus_hash)
        return Fresh(store)

    async def rebuild(  # noqa: PLR0913
        self,
        name: str,
        corpus_hash: int,
        documents: list[EmbeddableDocument],
        embeddings: list[TextEmbedding],
        model_name: str,
        dimensions: int,
    ) -> VectorIndex:
        """Write the full store, then (and only then) the new fingerprint.

        A failure anywhere before the fingerprint write leaves the previous
        fingerprint pointing at the previous, still intact store. If the
        fingerprint write itself fails, the new store's manifest carries
        ``corpus_hash`` and no longer matches the old fingerprint, so
        ``check`` reports it as corrupt.

        Raises:
            ValidationError: If documents and embeddings don't pair up
            EmbeddingModelMismatchError: If an embedding came from another model
            DimensionMismatchError: If an embedding has the wrong width

        """
        validate_corpus_name(name)

        if len(documents) != len(embeddings):
            msg = (
                f"Got {len(documents)} documents but {len(embeddings)} embeddings "
                f"for corpus {name}"
            )
            raise ValidationError(msg)

        records = []
        for document, embedding in zip(documents, embeddings, strict=True):
            if embedding.model_name != model_name:
                raise EmbeddingModelMismatchError(store_model=model_name, query_model=embedding.model_name)
            if embedding.dimensions != dimensions:
                raise DimensionMismatchError(expected=dimensions, actual=embedding.dimensions)
            records.append(
                VectorRecord(
                    id=document.id,
                    description=document.description,
                    payload=document.payload,
                    vector=embedding.vector,
                ),
            )

        store = await self.vector_store_factory.create(
            name,
            records,
            model_name=model_name,
            dimensions=dimensions,
            corpus_hash=corpus_hash,
        )

        try:
            self.fingerprint_store.write(
                name,
                CacheFingerprint(schema_version=self.schema_version, corpus_hash=corpus_hash),
            )
        except BaseException:
            await store.close()
            raise

        logger.info(
            "embedding_cache_rebuilt",
            corpus=name,
            record_count=len(records),
            corpus_hash=corpus_hash,
        )
        return store

    async def build_or_load(
        self,
        name: str,
        documents: list[EmbeddableDocument],
        embedding_generator: EmbeddingGenerator,
        salt: str = "",
    ) -> CorpusIndex:
        """Reuse the persisted store if the corpus is unchanged, else embed everything and rebuild."""
        start = time.perf_counter()
        model_name = embedding_generator.model_name
        corpus_hash = compute_corpus_hash(documents, salt=f"{model_name}|{salt}")

        lookup = await self.check(name, corpus_hash)
        if isinstance(lookup, Fresh):
            return CorpusIndex(index=lookup.store, corpus_hash=corpus_hash, rebuilt=False)

        logger.info(
            "embedding_cache_rebuilding",
            corpus=name,
            reason=lookup.reason.value,
            document_count=len(documents),
        )

        if documents:
            embeddings = await embedding_generator.generate_batch_embeddings(
                [document.description for document in documents],
            )
            dimensions = embeddings[0].dimensions
        else:
            embeddings = []
            model_info = await embedding_generator.get_model_info()
            dimensions = int(model_info["dimensions"])

        index = await self.rebuild(
            name,
            corpus_hash,
            documents,
            embeddings,
            model_name=model_name,
            dimensions=dimensions,
        )

        logger.info(
            "embedding_cache_build_complete",
            corpus=name,
            elapsed_seconds=round(time.perf_counter() - start, 2),
        )
        return CorpusIndex(index=index, corpus_hash=corpus_hash, rebuilt=True)
