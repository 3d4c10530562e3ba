"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from application.dtos.catalog_dtos import FieldCatalogRow
from domain.value_objects.example_query import ExampleQuery
from domain.value_objects.field_category import FieldCategory
from domain.value_objects.field_data_type import FieldDataType
from domain.value_objects.field_metadata import FieldMetadata
from domain.value_objects.metadata_snapshot import MetadataSnapshot
from tests.mocks import make_field


@pytest.fixture
def sample_fields() -> list[FieldMetadata]:
    """A small catalog spanning every category."""
    return [
        make_field("campaign", FieldCategory.RESOURCE, FieldDataType.MESSAGE, filterable=False),
        make_field("campaign.id", FieldCategory.ATTRIBUTE, FieldDataType.INT64),
        make_field("campaign.name", FieldCategory.ATTRIBUTE),
        make_field("campaign.status", FieldCategory.ATTRIBUTE, FieldDataType.ENUM),
        make_field("ad_group.name", FieldCategory.ATTRIBUTE),
        make_field("customer.descriptive_name", FieldCategory.ATTRIBUTE),
        make_field("metrics.impressions", FieldCategory.METRIC, FieldDataType.INT64),
        make_field("metrics.clicks", FieldCategory.METRIC, FieldDataType.INT64),
        make_field("metrics.cost_micros", FieldCategory.METRIC, FieldDataType.INT64),
        make_field("metrics.conversions", FieldCategory.METRIC, FieldDataType.DOUBLE),
        make_field("segments.date", FieldCategory.SEGMENT, FieldDataType.DATE),
        make_field("segments.device", FieldCategory.SEGMENT, FieldDataType.ENUM),
        make_field(
            "campaign.resource_name",
            FieldCategory.ATTRIBUTE,
            FieldDataType.RESOURCE_NAME,
            selectable=False,
        ),
    ]


@pytest.fixture
def sample_snapshot(sample_fields: list[FieldMetadata]) -> MetadataSnapshot:
    return MetadataSnapshot.from_fields(
        sample_fields,
        catalog_version="v22",
        last_updated=datetime.now(UTC),
    )


@pytest.fixture
def catalog_rows() -> list[FieldCatalogRow]:
    """Raw catalog rows as the remote service returns them."""
    return [
        FieldCatalogRow(
            name="campaign.name",
            category_code=2,
            type_code=10,
            selectable=True,
            filterable=True,
            sortable=True,
        ),
        FieldCatalogRow(
            name="metrics.clicks",
            category_code=4,
            type_code=7,
            selectable=True,
            filterable=True,
            sortable=True,
        ),
        FieldCatalogRow(
            name="segments.date",
            category_code=3,
            type_code=2,
            selectable=True,
            filterable=True,
            sortable=True,
        ),
        FieldCatalogRow(name="campaign", category_code=1, type_code=8, selectable=True),
        FieldCatalogRow(name="metrics.future_metric", category_code=99, type_code=42, selectable=True),
    ]


@pytest.fixture
def sample_examples() -> list[ExampleQuery]:
    return [
        ExampleQuery(
            id="accounts_with_traffic_last_week",
            summary="Accounts with impressions and clicks over the last 7 days",
            query="SELECT customer.id, metrics.impressions, metrics.clicks FROM customer",
        ),
        ExampleQuery(
            id="keywords_with_top_traffic_last_week",
            summary="Top keywords by clicks in the last 7 days",
            query="SELECT ad_group_criterion.keyword.text, metrics.clicks FROM keyword_view",
        ),
        ExampleQuery(
            id="search_terms_with_top_cpa_last_30_days",
            summary="Search terms with the highest cost per conversion",
            query="SELECT search_term_view.search_term, metrics.cost_per_conversion FROM search_term_view",
        ),
    ]
