from __future__ import annotations

from datetime import timedelta

from lagom import Container, Singleton

from application.ports.embedding_generator import EmbeddingGenerator
from application.ports.example_query_repository import ExampleQueryRepository
from application.ports.field_catalog_source import FieldCatalogSource
from application.ports.fingerprint_store import FingerprintStore
from application.ports.metadata_snapshot_store import MetadataSnapshotStore
from application.ports.vector_store import VectorStoreFactory
from application.services.embedding_cache import ContentAddressedEmbeddingCache
from application.services.metadata_cache import MetadataCache
from application.services.retrieval_indexes import RetrievalIndexProvider
from application.services.retrieval_service import RetrievalService
from application.use_cases.catalog_use_cases import (
    LoadFieldMetadataUseCase,
    ValidateFieldSelectionUseCase,
)
from application.use_cases.retrieval_use_cases import (
    PrepareRetrievalIndexesUseCase,
    RetrieveExampleContextUseCase,
    SuggestFieldsUseCase,
)
from infrastructure.config import Settings, settings
from infrastructure.cookbook.toml_example_repository import TomlExampleQueryRepository
from infrastructure.embeddings.sentence_transformer_generator import SentenceTransformerGenerator
from infrastructure.persistence.fingerprint_file_store import FingerprintFileStore
from infrastructure.persistence.json_snapshot_store import JsonSnapshotStore
from infrastructure.vector_stores.qdrant_local_store import QdrantLocalStoreFactory


def create_container(
    catalog_source: FieldCatalogSource | None = None,
    config: Settings = settings,
) -> Container:
    """Wire every component from settings.

    ``catalog_source`` is the authenticated connection to the remote field
    catalog; without one the catalog is served from the local snapshot only.
    """
    container = Container()
    cache_root = config.cache_root
    max_age = timedelta(days=config.metadata_max_age_days)

    # Persistence
    container[MetadataSnapshotStore] = lambda _: JsonSnapshotStore()
    container[FingerprintStore] = lambda _: FingerprintFileStore(cache_root=cache_root)
    container[VectorStoreFactory] = lambda _: QdrantLocalStoreFactory(cache_root=cache_root)
    container[ExampleQueryRepository] = lambda _: TomlExampleQueryRepository()

    # Embedding Generator (model is loaded once per process)
    container[EmbeddingGenerator] = Singleton(
        lambda: SentenceTransformerGenerator(
            model_name=config.embedding_model_name,
            device=config.embedding_device,
        ),
    )

    # Services
    container[MetadataCache] = lambda c: MetadataCache(
        cache_root=cache_root,
        snapshot_store=c[MetadataSnapshotStore],
        catalog_version=config.catalog_version,
        fetch_timeout=config.catalog_fetch_timeout_seconds,
        page_size=config.catalog_page_size,
    )
    container[ContentAddressedEmbeddingCache] = lambda c: ContentAddressedEmbeddingCache(
        fingerprint_store=c[FingerprintStore],
        vector_store_factory=c[VectorStoreFactory],
    )
    container[RetrievalIndexProvider] = lambda c: RetrievalIndexProvider(
        embedding_cache=c[ContentAddressedEmbeddingCache],
        embedding_generator=c[EmbeddingGenerator],
        example_repository=c[ExampleQueryRepository],
        cookbook_path=config.query_cookbook_path,
    )
    container[RetrievalService] = lambda c: RetrievalService(
        embedding_generator=c[EmbeddingGenerator],
    )

    # Catalog Use Cases
    container[LoadFieldMetadataUseCase] = lambda c: LoadFieldMetadataUseCase(
        metadata_cache=c[MetadataCache],
        catalog_source=catalog_source,
        max_age=max_age,
    )
    container[ValidateFieldSelectionUseCase] = lambda c: ValidateFieldSelectionUseCase(
        metadata_cache=c[MetadataCache],
        catalog_source=catalog_source,
        max_age=max_age,
    )

    # Retrieval Use Cases
    container[PrepareRetrievalIndexesUseCase] = lambda c: PrepareRetrievalIndexesUseCase(
        metadata_cache=c[MetadataCache],
        index_provider=c[RetrievalIndexProvider],
        catalog_source=catalog_source,
        max_age=max_age,
    )
    container[SuggestFieldsUseCase] = lambda c: SuggestFieldsUseCase(
        metadata_cache=c[MetadataCache],
        index_provider=c[RetrievalIndexProvider],
        retrieval_service=c[RetrievalService],
        catalog_source=catalog_source,
        max_age=max_age,
    )
    container[RetrieveExampleContextUseCase] = lambda c: RetrieveExampleContextUseCase(
        index_provider=c[RetrievalIndexProvider],
        retrieval_service=c[RetrievalService],
    )

    return container
