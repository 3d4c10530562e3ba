from __future__ import annotations

from enum import Enum


class FieldCategory(str, Enum):
    """Closed classification of a catalog field, with an explicit UNKNOWN variant."""

    RESOURCE = "RESOURCE"
    ATTRIBUTE = "ATTRIBUTE"
    SEGMENT = "SEGMENT"
    METRIC = "METRIC"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: int) -> FieldCategory:
        """Map a wire category code; unmapped codes become UNKNOWN."""
        return _CATEGORY_CODES.get(code, cls.UNKNOWN)

    @classmethod
    def _missing_(cls, value: object) -> FieldCategory:
        # Snapshots written by a newer catalog may carry categories we don't know yet
        return cls.UNKNOWN


_CATEGORY_CODES = {
    1: FieldCategory.RESOURCE,
    2: FieldCategory.ATTRIBUTE,
    3: FieldCategory.SEGMENT,
    4: FieldCategory.METRIC,
}
