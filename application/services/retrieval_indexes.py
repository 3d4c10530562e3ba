"""The two named corpora behind retrieval, and how each one is built."""

from __future__ import annotations

from pathlib import Path

import structlog

from application.ports.embedding_generator import EmbeddingGenerator
from application.ports.example_query_repository import ExampleQueryRepository
from application.services.embedding_cache import ContentAddressedEmbeddingCache, CorpusIndex
from domain.services.document_projector import FIELD_DESCRIPTION_VERSION, DocumentProjector
from domain.value_objects.metadata_snapshot import MetadataSnapshot

logger = structlog.get_logger()

FIELD_CORPUS = "field_metadata"
EXAMPLE_CORPUS = "query_cookbook"


class RetrievalIndexProvider:
    """Projects each corpus and hands it to the embedding cache.

    Returned indexes are open; callers close them when done.
    """

    def __init__(
        self,
        embedding_cache: ContentAddressedEmbeddingCache,
        embedding_generator: EmbeddingGenerator,
        example_repository: ExampleQueryRepository,
        cookbook_path: Path,
    ) -> None:
        self.embedding_cache = embedding_cache
        self.embedding_generator = embedding_generator
        self.example_repository = example_repository
        self.cookbook_path = cookbook_path

    async def field_index(self, snapshot: MetadataSnapshot) -> CorpusIndex:
        documents = DocumentProjector.project_fields(snapshot)
        return await self.embedding_cache.build_or_load(
            FIELD_CORPUS,
            documents,
            self.embedding_generator,
            salt=f"{FIELD_DESCRIPTION_VERSION}|{snapshot.catalog_version}",
        )

    async def example_index(self) -> CorpusIndex:
        examples = self.example_repository.load(self.cookbook_path)
        logger.info("query_cookbook_loaded", path=str(self.cookbook_path), example_count=len(examples))
        documents = DocumentProjector.project_examples(examples)
        return await self.embedding_cache.build_or_load(
            EXAMPLE_CORPUS,
            documents,
            self.embedding_generator,
        )
