from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.exceptions import FieldSelectionError
from domain.services.field_selection_validator import validate_field_selection
from domain.value_objects.field_metadata import FieldMetadata
from domain.value_objects.validation_result import ValidationResult

COMMON_METRICS = ("impressions", "clicks", "cost_micros", "conversions", "ctr", "average_cpc")
COMMON_SEGMENTS = ("date", "week", "month", "device", "ad_network_type")


class MetadataSnapshot(BaseModel):
    """Point-in-time copy of the remote field catalog.

    A snapshot is replaced wholesale on refresh and never mutated field by
    field. The ``resources`` index is optional: snapshots persisted without it
    fall back to grouping fields by their name prefix, and both paths must
    yield the same grouping.
    """

    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
    catalog_version: str

    fields: dict[str, FieldMetadata] = Field(default_factory=dict)
    """Field name -> metadata."""

    resources: dict[str, list[str]] | None = None
    """Resource -> field names, built in the same pass as ``fields`` on fetch."""

    model_config = {"frozen": True}

    @field_validator("last_updated")
    @classmethod
    def assume_utc_when_naive(cls, v: datetime) -> datetime:
        """Read timestamps written without an offset as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @model_validator(mode="after")
    def validate_field_keys(self) -> MetadataSnapshot:
        """Ensure every map key is the name of the field it points to."""
        for key, field in self.fields.items():
            if key != field.name:
                msg = f"Field map key {key!r} does not match field name {field.name!r}"
                raise ValueError(msg)
        return self

    @classmethod
    def from_fields(
        cls,
        fields: Iterable[FieldMetadata],
        catalog_version: str,
        last_updated: datetime | None = None,
        *,
        with_resource_index: bool = True,
    ) -> MetadataSnapshot:
        """Build a snapshot and its resource index in one pass over ``fields``."""
        by_name: dict[str, FieldMetadata] = {}
        resources: dict[str, list[str]] = {}

        for field in fields:
            resource = field.get_resource()
            if resource is not None and field.name not in by_name:
                resources.setdefault(resource, []).append(field.name)
            by_name[field.name] = field

        return cls(
            last_updated=last_updated or datetime.now(UTC),
            catalog_version=catalog_version,
            fields=by_name,
            resources=resources if with_resource_index else None,
        )

    def age(self, now: datetime | None = None) -> timedelta:
        return (now or datetime.now(UTC)) - self.last_updated

    # ========================================================================
    # LOOKUPS
    # ========================================================================

    def get_field(self, name: str) -> FieldMetadata | None:
        return self.fields.get(name)

    def find_fields(self, pattern: str) -> list[FieldMetadata]:
        """Fields whose name contains ``pattern``, sorted by name."""
        return self._sorted(f for f in self.fields.values() if pattern in f.name)

    def get_metrics(self, pattern: str | None = None) -> list[FieldMetadata]:
        return self._sorted(
            f for f in self.fields.values() if f.is_metric and (pattern is None or pattern in f.name)
        )

    def get_segments(self, pattern: str | None = None) -> list[FieldMetadata]:
        return self._sorted(
            f
            for f in self.fields.values()
            if f.is_segment and (pattern is None or pattern in f.name)
        )

    def get_attributes(self, resource: str) -> list[FieldMetadata]:
        """Attribute-category fields belonging to ``resource``."""
        return [f for f in self.get_resource_fields(resource) if f.is_attribute]

    def get_resource_fields(self, resource: str) -> list[FieldMetadata]:
        """All fields of ``resource``, via the index when present."""
        if self.resources is not None and resource in self.resources:
            return self._sorted(
                self.fields[name] for name in self.resources[resource] if name in self.fields
            )
        return self._sorted(f for f in self.fields.values() if f.get_resource() == resource)

    def get_resources(self) -> list[str]:
        """Sorted list of every known resource."""
        if self.resources is not None:
            return sorted(self.resources)
        return sorted({r for f in self.fields.values() if (r := f.get_resource()) is not None})

    def validate_field_selection(self, names: list[str]) -> ValidationResult:
        return validate_field_selection(self, names)

    def require_valid_selection(self, names: list[str]) -> ValidationResult:
        """Validate and raise FieldSelectionError if the selection has errors.

        Returns the result on success so callers can still surface warnings.
        """
        result = validate_field_selection(self, names)
        if not result.is_valid:
            raise FieldSelectionError(result)
        return result

    # ========================================================================
    # REPORTING
    # ========================================================================

    def export_summary(self) -> str:
        """Human-readable overview of the catalog."""
        lines = [
            "# Field Catalog Metadata",
            "",
            f"Last Updated: {self.last_updated.astimezone(UTC):%Y-%m-%d %H:%M:%S} UTC",
            f"Catalog Version: {self.catalog_version}",
            f"Total Fields: {len(self.fields)}",
            "",
            "## Resources",
            "",
        ]
        lines.extend(
            f"- {resource}: {len(self.get_resource_fields(resource))} fields"
            for resource in self.get_resources()
        )
        lines.append("")

        lines.append(f"## Metrics ({len(self.get_metrics())} total)")
        lines.append("")
        lines.append("Common metrics:")
        for metric in COMMON_METRICS:
            field = self.get_field(f"metrics.{metric}")
            if field is not None:
                filterable = "filterable" if field.filterable else "not filterable"
                lines.append(f"- {field.name}: {field.data_type.value} ({filterable})")
        lines.append("")

        lines.append(f"## Segments ({len(self.get_segments())} total)")
        lines.append("")
        lines.append("Common segments:")
        for segment in COMMON_SEGMENTS:
            field = self.get_field(f"segments.{segment}")
            if field is not None:
                lines.append(f"- {field.name}: {field.data_type.value}")

        return "\n".join(lines) + "\n"

    @staticmethod
    def _sorted(fields: Iterable[FieldMetadata]) -> list[FieldMetadata]:
        return sorted(fields, key=lambda f: f.name)
