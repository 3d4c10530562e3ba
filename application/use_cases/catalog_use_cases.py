"""Catalog use cases: loading the field metadata snapshot and validating selections."""

from datetime import timedelta

import structlog
from returns.result import Failure, Result, Success

from application.dtos.catalog_dtos import (
    CatalogSummaryResponse,
    FieldSelectionRequest,
    FieldSelectionResponse,
)
from application.dtos.errors import AppError
from application.mappers.catalog_mappers import CatalogMapper
from application.ports.field_catalog_source import FieldCatalogSource
from application.services.metadata_cache import MetadataCache
from domain.exceptions import CatalogUnavailableError, FieldSelectionError

logger = structlog.get_logger()


class LoadFieldMetadataUseCase:
    """Return a fresh field catalog snapshot, fetching it if the local one is stale."""

    def __init__(
        self,
        metadata_cache: MetadataCache,
        catalog_source: FieldCatalogSource | None = None,
        max_age: timedelta = timedelta(days=7),
    ) -> None:
        self.metadata_cache = metadata_cache
        self.catalog_source = catalog_source
        self.max_age = max_age

    async def execute(self, force_refresh: bool = False) -> Result[CatalogSummaryResponse, AppError]:
        """Load the catalog snapshot.

        Args:
            force_refresh: Ignore the disk snapshot and fetch from the catalog source

        """
        try:
            logger.info("load_field_metadata_start", force_refresh=force_refresh)

            max_age = timedelta(0) if force_refresh else self.max_age
            snapshot = await self.metadata_cache.load_or_fetch(self.catalog_source, max_age=max_age)

            logger.info("load_field_metadata_success", field_count=len(snapshot.fields))

            return Success(
                CatalogSummaryResponse(
                    catalog_version=snapshot.catalog_version,
                    last_updated=snapshot.last_updated.isoformat(),
                    field_count=len(snapshot.fields),
                    resource_count=len(snapshot.get_resources()),
                    summary=snapshot.export_summary(),
                ),
            )

        except CatalogUnavailableError as e:
            logger.error("field_metadata_unavailable", error=str(e))
            return Failure(AppError("unavailable", str(e)))
        except TimeoutError:
            msg = "Timed out fetching the field catalog"
            logger.error("field_catalog_fetch_timeout", timeout=self.metadata_cache.fetch_timeout)
            return Failure(AppError("unavailable", msg))
        except Exception as e:
            logger.error("load_field_metadata_failed", error=str(e), exc_info=True)
            return Failure(
                AppError(
                    "internal_error",
                    f"Failed to load field metadata: {e!s}",
                    details={"error_type": type(e).__name__},
                ),
            )


class ValidateFieldSelectionUseCase:
    """Check a query's selected fields against the catalog.

    Selections with unknown or non-selectable fields are reported as a
    ``validation`` failure whose details carry the structured errors; valid
    selections may still carry warnings.
    """

    def __init__(
        self,
        metadata_cache: MetadataCache,
        catalog_source: FieldCatalogSource | None = None,
        max_age: timedelta = timedelta(days=7),
    ) -> None:
        self.metadata_cache = metadata_cache
        self.catalog_source = catalog_source
        self.max_age = max_age

    async def execute(self, request: FieldSelectionRequest) -> Result[FieldSelectionResponse, AppError]:
        try:
            snapshot = await self.metadata_cache.load_or_fetch(self.catalog_source, max_age=self.max_age)
            result = snapshot.require_valid_selection(request.field_names)
            response = CatalogMapper.to_selection_response(result)

            logger.info(
                "field_selection_valid",
                field_count=len(request.field_names),
                warnings=response.warnings,
            )
            return Success(response)

        except FieldSelectionError as e:
            response = CatalogMapper.to_selection_response(e.result)
            logger.info(
                "field_selection_invalid",
                field_count=len(request.field_names),
                errors=response.errors,
            )
            return Failure(
                AppError(
                    "validation",
                    str(e),
                    details={"errors": response.errors, "warnings": response.warnings},
                ),
            )
        except CatalogUnavailableError as e:
            logger.error("field_metadata_unavailable", error=str(e))
            return Failure(AppError("unavailable", str(e)))
        except TimeoutError:
            logger.error("field_catalog_fetch_timeout", timeout=self.metadata_cache.fetch_timeout)
            return Failure(AppError("unavailable", "Timed out fetching the field catalog"))
        except Exception as e:
            logger.error("validate_field_selection_failed", error=str(e), exc_info=True)
            return Failure(AppError("internal_error", f"Failed to validate field selection: {e!s}"))
