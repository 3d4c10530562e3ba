"""Retrieval use cases: index preparation, field suggestion, and example context."""

import asyncio
from datetime import timedelta

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.retrieval_dtos import (
    ExampleContextRequest,
    ExampleContextResponse,
    FieldSuggestionRequest,
    FieldSuggestionResponse,
    RetrievalIndexesResponse,
)
from application.ports.field_catalog_source import FieldCatalogSource
from application.services.metadata_cache import MetadataCache
from application.services.retrieval_indexes import RetrievalIndexProvider
from application.services.retrieval_service import RetrievalService
from domain.exceptions import (
    CatalogUnavailableError,
    DimensionMismatchError,
    EmbeddingModelMismatchError,
    ValidationError,
)

logger = structlog.get_logger()


class PrepareRetrievalIndexesUseCase:
    """Make sure both retrieval indexes are current, rebuilding whichever is stale.

    The catalog load and the cookbook index build don't depend on each other
    and run concurrently; the field index needs the catalog and follows it.
    """

    def __init__(
        self,
        metadata_cache: MetadataCache,
        index_provider: RetrievalIndexProvider,
        catalog_source: FieldCatalogSource | None = None,
        max_age: timedelta = timedelta(days=7),
    ) -> None:
        self.metadata_cache = metadata_cache
        self.index_provider = index_provider
        self.catalog_source = catalog_source
        self.max_age = max_age

    async def execute(self) -> Result[RetrievalIndexesResponse, AppError]:
        try:
            logger.info("prepare_retrieval_indexes_start")

            snapshot_or_error, examples_or_error = await asyncio.gather(
                self.metadata_cache.load_or_fetch(self.catalog_source, max_age=self.max_age),
                self.index_provider.example_index(),
                return_exceptions=True,
            )
            if isinstance(examples_or_error, BaseException):
                raise examples_or_error
            example_corpus = examples_or_error

            try:
                if isinstance(snapshot_or_error, BaseException):
                    raise snapshot_or_error
                field_corpus = await self.index_provider.field_index(snapshot_or_error)
                try:
                    response = RetrievalIndexesResponse(
                        field_count=await field_corpus.index.size(),
                        example_count=await example_corpus.index.size(),
                        field_index_rebuilt=field_corpus.rebuilt,
                        example_index_rebuilt=example_corpus.rebuilt,
                    )
                finally:
                    await field_corpus.index.close()
            finally:
                await example_corpus.index.close()

            logger.info(
                "prepare_retrieval_indexes_success",
                field_count=response.field_count,
                example_count=response.example_count,
                field_index_rebuilt=response.field_index_rebuilt,
                example_index_rebuilt=response.example_index_rebuilt,
            )
            return Success(response)

        except CatalogUnavailableError as e:
            logger.error("field_metadata_unavailable", error=str(e))
            return Failure(AppError("unavailable", str(e)))
        except ValidationError as e:
            logger.error("retrieval_corpus_invalid", error=str(e))
            return Failure(AppError("validation", str(e)))
        except FileNotFoundError as e:
            logger.error("query_cookbook_missing", error=str(e))
            return Failure(AppError("configuration", f"Query cookbook not found: {e!s}"))
        except Exception as e:
            logger.error("prepare_retrieval_indexes_failed", error=str(e), exc_info=True)
            return Failure(
                AppError(
                    "internal_error",
                    f"Failed to prepare retrieval indexes: {e!s}",
                    details={"error_type": type(e).__name__},
                ),
            )


class SuggestFieldsUseCase:
    """Suggest catalog fields relevant to a free-text topic."""

    def __init__(
        self,
        metadata_cache: MetadataCache,
        index_provider: RetrievalIndexProvider,
        retrieval_service: RetrievalService,
        catalog_source: FieldCatalogSource | None = None,
        max_age: timedelta = timedelta(days=7),
    ) -> None:
        self.metadata_cache = metadata_cache
        self.index_provider = index_provider
        self.retrieval_service = retrieval_service
        self.catalog_source = catalog_source
        self.max_age = max_age

    async def execute(self, request: FieldSuggestionRequest) -> Result[FieldSuggestionResponse, AppError]:
        try:
            logger.info("suggest_fields_start", topic=request.topic[:100], limit=request.limit)

            snapshot = await self.metadata_cache.load_or_fetch(self.catalog_source, max_age=self.max_age)
            corpus = await self.index_provider.field_index(snapshot)
            try:
                fields = await self.retrieval_service.suggest_fields(
                    snapshot,
                    corpus.index,
                    request.topic,
                    request.limit,
                )
            finally:
                await corpus.index.close()

            return Success(
                FieldSuggestionResponse(
                    topic=request.topic,
                    fields=fields,
                    formatted=self.retrieval_service.format_relevant_fields(fields),
                    query_context=self.retrieval_service.build_query_context(snapshot, request.topic),
                ),
            )

        except CatalogUnavailableError as e:
            logger.error("field_metadata_unavailable", error=str(e))
            return Failure(AppError("unavailable", str(e)))
        except (EmbeddingModelMismatchError, DimensionMismatchError) as e:
            logger.error("field_index_incompatible", error=str(e))
            return Failure(AppError("configuration", str(e)))
        except Exception as e:
            logger.error("suggest_fields_failed", topic=request.topic[:100], error=str(e), exc_info=True)
            return Failure(AppError("internal_error", f"Failed to suggest fields: {e!s}"))


class RetrieveExampleContextUseCase:
    """Find curated example queries similar to a request and format them as few-shot context."""

    def __init__(
        self,
        index_provider: RetrievalIndexProvider,
        retrieval_service: RetrievalService,
    ) -> None:
        self.index_provider = index_provider
        self.retrieval_service = retrieval_service

    async def execute(self, request: ExampleContextRequest) -> Result[ExampleContextResponse, AppError]:
        try:
            logger.info(
                "retrieve_example_context_start",
                request_length=len(request.request_text),
                limit=request.limit,
            )

            corpus = await self.index_provider.example_index()
            try:
                examples = await self.retrieval_service.example_context(
                    corpus.index,
                    request.request_text,
                    request.limit,
                )
            finally:
                await corpus.index.close()

            return Success(
                ExampleContextResponse(
                    request_text=request.request_text,
                    examples=examples,
                    context=self.retrieval_service.format_example_context(examples),
                ),
            )

        except FileNotFoundError as e:
            logger.error("query_cookbook_missing", error=str(e))
            return Failure(AppError("configuration", f"Query cookbook not found: {e!s}"))
        except (EmbeddingModelMismatchError, DimensionMismatchError) as e:
            logger.error("example_index_incompatible", error=str(e))
            return Failure(AppError("configuration", str(e)))
        except Exception as e:
            logger.error(
                "retrieve_example_context_failed",
                request=request.request_text[:100],
                error=str(e),
                exc_info=True,
            )
            return Failure(AppError("internal_error", f"Failed to retrieve example context: {e!s}"))
