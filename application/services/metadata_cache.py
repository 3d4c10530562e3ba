"""Local, schema-aware mirror of the remote field catalog."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from pathlib import Path

import structlog

from application.dtos.catalog_dtos import FIELD_CATALOG_QUERY
from application.mappers.catalog_mappers import CatalogMapper
from application.ports.field_catalog_source import FieldCatalogSource
from application.ports.metadata_snapshot_store import MetadataSnapshotStore
from domain.exceptions import CatalogUnavailableError, SnapshotCorruptError, SnapshotNotFoundError
from domain.value_objects.metadata_snapshot import MetadataSnapshot

logger = structlog.get_logger()

SNAPSHOT_FILENAME = "field_metadata.json"


class MetadataCache:
    """Keeps the field catalog snapshot fresh.

    Serves the snapshot from disk while it is younger than ``max_age``, and
    otherwise fetches a fresh one from the catalog source, persists it, and
    returns it. The fetch is bounded by ``fetch_timeout`` seconds.
    """

    def __init__(
        self,
        cache_root: Path,
        snapshot_store: MetadataSnapshotStore,
        catalog_version: str = "v22",
        fetch_timeout: float | None = 60.0,
        page_size: int = 10_000,
    ) -> None:
        self.cache_root = cache_root
        self.snapshot_store = snapshot_store
        self.catalog_version = catalog_version
        self.fetch_timeout = fetch_timeout
        self.page_size = page_size

    @property
    def default_path(self) -> Path:
        return self.cache_root / SNAPSHOT_FILENAME

    async def load_or_fetch(
        self,
        api_context: FieldCatalogSource | None,
        path: Path | None = None,
        max_age: timedelta = timedelta(days=7),
    ) -> MetadataSnapshot:
        """Return a usable snapshot, fetching a fresh one if needed.

        Args:
            api_context: Catalog source to fetch from, or None if offline
            path: Snapshot location (defaults to ``<cache_root>/field_metadata.json``)
            max_age: Snapshots at least this old are refreshed

        Raises:
            CatalogUnavailableError: If there is no fresh snapshot and no source

        """
        path = path or self.default_path

        try:
            snapshot = self.snapshot_store.load(path)
            age = snapshot.age()
            if age < max_age:
                logger.info(
                    "metadata_cache_loaded",
                    path=str(path),
                    age_days=age.days,
                    field_count=len(snapshot.fields),
                )
                return snapshot
            logger.info("metadata_cache_stale", path=str(path), age_days=age.days)
        except SnapshotNotFoundError:
            logger.info("metadata_cache_missing", path=str(path))
        except SnapshotCorruptError as e:
            logger.warning("metadata_cache_corrupt", path=str(path), error=str(e))

        if api_context is None:
            msg = f"No usable field metadata snapshot at {path} and no catalog source to fetch from"
            raise CatalogUnavailableError(msg)

        snapshot = await self.fetch(api_context)
        self.snapshot_store.save(snapshot, path)
        return snapshot

    async def fetch(self, api_context: FieldCatalogSource) -> MetadataSnapshot:
        """Fetch the full field catalog in one request.

        Raises:
            TimeoutError: If the catalog does not answer within ``fetch_timeout``

        """
        logger.info("fetching_field_catalog", catalog_version=self.catalog_version)

        rows = await asyncio.wait_for(
            api_context.search_fields(FIELD_CATALOG_QUERY, self.page_size),
            timeout=self.fetch_timeout,
        )

        snapshot = MetadataSnapshot.from_fields(
            (CatalogMapper.to_field_metadata(row) for row in rows),
            catalog_version=self.catalog_version,
        )

        logger.info(
            "field_catalog_fetched",
            field_count=len(snapshot.fields),
            resource_count=len(snapshot.resources or {}),
        )
        return snapshot
