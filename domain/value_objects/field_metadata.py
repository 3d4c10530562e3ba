from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from domain.value_objects.field_category import FieldCategory
from domain.value_objects.field_data_type import FieldDataType


def resource_of(name: str) -> str | None:
    """Return the resource a dotted field path belongs to.

    ``resource_of("campaign.name") == "campaign"``; names without a ``.`` have
    no resource.
    """
    head, sep, _ = name.partition(".")
    return head if sep else None


class FieldMetadata(BaseModel):
    """Schema metadata for one queryable catalog field.

    ``category`` is the authoritative classification. The ``metrics.`` and
    ``segments.`` name prefixes are only consulted as a fallback.
    """

    name: str = Field(..., min_length=1)
    """Dotted field path, unique within a catalog (e.g. ``metrics.clicks``)."""

    category: FieldCategory = FieldCategory.UNKNOWN
    data_type: FieldDataType = FieldDataType.UNKNOWN
    selectable: bool = False
    filterable: bool = False
    sortable: bool = False

    metrics_compatible: bool = False
    """Whether the field can be selected alongside metrics (attributes and segments)."""

    resource_name: str | None = None
    """Resource name reported by the catalog, if any."""

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names with surrounding whitespace."""
        if v != v.strip():
            msg = f"Field name must not have surrounding whitespace: {v!r}"
            raise ValueError(msg)
        return v

    @classmethod
    def create(
        cls,
        name: str,
        category: FieldCategory,
        data_type: FieldDataType,
        *,
        selectable: bool,
        filterable: bool,
        sortable: bool,
        resource_name: str | None = None,
    ) -> FieldMetadata:
        """Build a field, deriving ``metrics_compatible`` from its category."""
        return cls(
            name=name,
            category=category,
            data_type=data_type,
            selectable=selectable,
            filterable=filterable,
            sortable=sortable,
            metrics_compatible=category in (FieldCategory.ATTRIBUTE, FieldCategory.SEGMENT),
            resource_name=resource_name or None,
        )

    @property
    def is_metric(self) -> bool:
        if self.category == FieldCategory.UNKNOWN:
            return self.name.startswith("metrics.")
        return self.category == FieldCategory.METRIC

    @property
    def is_segment(self) -> bool:
        if self.category == FieldCategory.UNKNOWN:
            return self.name.startswith("segments.")
        return self.category == FieldCategory.SEGMENT

    @property
    def is_attribute(self) -> bool:
        return self.category == FieldCategory.ATTRIBUTE

    @property
    def is_resource(self) -> bool:
        return self.category == FieldCategory.RESOURCE

    def get_resource(self) -> str | None:
        """Resource this field belongs to (``campaign`` for ``campaign.name``)."""
        return resource_of(self.name)
