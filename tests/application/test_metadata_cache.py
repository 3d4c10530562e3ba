"""Tests for the MetadataCache service."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from application.dtos.catalog_dtos import FIELD_CATALOG_QUERY, FieldCatalogRow
from application.services.metadata_cache import MetadataCache
from domain.exceptions import CatalogUnavailableError
from domain.value_objects.field_category import FieldCategory
from domain.value_objects.field_data_type import FieldDataType
from domain.value_objects.metadata_snapshot import MetadataSnapshot
from tests.mocks import MockFieldCatalogSource, MockSnapshotStore

CACHE_ROOT = Path("/cache")


def _aged(snapshot: MetadataSnapshot, days: int) -> MetadataSnapshot:
    return snapshot.model_copy(update={"last_updated": datetime.now(UTC) - timedelta(days=days)})


class TestMetadataCacheLoadOrFetch:

    @pytest.mark.asyncio
    async def test_fresh_snapshot_served_from_disk(self, sample_snapshot: MetadataSnapshot) -> None:
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore(_aged(sample_snapshot, 1), CACHE_ROOT / "field_metadata.json"))
        source = MockFieldCatalogSource()

        snapshot = await cache.load_or_fetch(source, max_age=timedelta(days=7))

        assert snapshot.fields == sample_snapshot.fields
        assert source.search_calls == []

    @pytest.mark.asyncio
    async def test_stale_snapshot_refetched_and_saved(
        self,
        sample_snapshot: MetadataSnapshot,
        catalog_rows: list[FieldCatalogRow],
    ) -> None:
        path = CACHE_ROOT / "field_metadata.json"
        store = MockSnapshotStore(_aged(sample_snapshot, 8), path)
        source = MockFieldCatalogSource(rows=catalog_rows)
        cache = MetadataCache(CACHE_ROOT, store)

        snapshot = await cache.load_or_fetch(source, max_age=timedelta(days=7))

        assert set(snapshot.fields) == {r.name for r in catalog_rows}
        assert store.save_calls == [path]
        assert store.snapshots[path] is snapshot

    @pytest.mark.asyncio
    async def test_missing_snapshot_fetched(self, catalog_rows: list[FieldCatalogRow]) -> None:
        store = MockSnapshotStore()
        cache = MetadataCache(CACHE_ROOT, store)

        snapshot = await cache.load_or_fetch(MockFieldCatalogSource(rows=catalog_rows))

        assert len(snapshot.fields) == len(catalog_rows)
        assert store.save_calls == [cache.default_path]

    @pytest.mark.asyncio
    async def test_corrupt_snapshot_treated_as_stale(self, catalog_rows: list[FieldCatalogRow]) -> None:
        path = Path("/elsewhere/snapshot.json")
        store = MockSnapshotStore()
        store.corrupt.add(path)
        cache = MetadataCache(CACHE_ROOT, store)

        snapshot = await cache.load_or_fetch(MockFieldCatalogSource(rows=catalog_rows), path=path)

        assert len(snapshot.fields) == len(catalog_rows)
        assert store.save_calls == [path]

    @pytest.mark.asyncio
    async def test_unavailable_without_snapshot_or_source(self) -> None:
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore())

        with pytest.raises(CatalogUnavailableError):
            await cache.load_or_fetch(None)

    @pytest.mark.asyncio
    async def test_stale_snapshot_without_source_is_unavailable(self, sample_snapshot: MetadataSnapshot) -> None:
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore(_aged(sample_snapshot, 30), CACHE_ROOT / "field_metadata.json"))

        with pytest.raises(CatalogUnavailableError):
            await cache.load_or_fetch(None, max_age=timedelta(days=7))

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self) -> None:
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore())
        source = MockFieldCatalogSource(raise_on_call=ConnectionError("network down"))

        with pytest.raises(ConnectionError, match="network down"):
            await cache.load_or_fetch(source)


class TestMetadataCacheFetch:

    @pytest.mark.asyncio
    async def test_fetch_maps_codes_and_builds_index(self, catalog_rows: list[FieldCatalogRow]) -> None:
        source = MockFieldCatalogSource(rows=catalog_rows)
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore(), catalog_version="v22", page_size=500)

        snapshot = await cache.fetch(source)

        assert source.search_calls == [{"query": FIELD_CATALOG_QUERY, "page_size": 500}]
        assert snapshot.catalog_version == "v22"

        clicks = snapshot.fields["metrics.clicks"]
        assert clicks.category == FieldCategory.METRIC
        assert clicks.data_type == FieldDataType.INT64

        # Unmapped codes are kept as UNKNOWN, not dropped
        future = snapshot.fields["metrics.future_metric"]
        assert future.category == FieldCategory.UNKNOWN
        assert future.data_type == FieldDataType.UNKNOWN
        assert future.is_metric

        assert snapshot.resources == {
            "campaign": ["campaign.name"],
            "metrics": ["metrics.clicks", "metrics.future_metric"],
            "segments": ["segments.date"],
        }

    @pytest.mark.asyncio
    async def test_fetch_times_out(self) -> None:
        source = MockFieldCatalogSource(delay=1.0)
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore(), fetch_timeout=0.01)

        with pytest.raises(TimeoutError):
            await cache.fetch(source)

    @pytest.mark.asyncio
    async def test_padded_row_name_does_not_fail_fetch(self, catalog_rows: list[FieldCatalogRow]) -> None:
        rows = [*catalog_rows, FieldCatalogRow(name=" campaign.status ", category_code=2, type_code=4)]
        cache = MetadataCache(CACHE_ROOT, MockSnapshotStore())

        snapshot = await cache.fetch(MockFieldCatalogSource(rows=rows))

        assert "campaign.status" in snapshot.fields
        assert snapshot.resources["campaign"] == ["campaign.name", "campaign.status"]
