from __future__ import annotations

from enum import Enum


class FieldDataType(str, Enum):
    """Closed set of catalog field value types."""

    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    DOUBLE = "DOUBLE"
    ENUM = "ENUM"
    FLOAT = "FLOAT"
    INT32 = "INT32"
    INT64 = "INT64"
    MESSAGE = "MESSAGE"
    RESOURCE_NAME = "RESOURCE_NAME"
    STRING = "STRING"
    UINT64 = "UINT64"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: int) -> FieldDataType:
        """Map a wire type code; unmapped codes become UNKNOWN."""
        return _TYPE_CODES.get(code, cls.UNKNOWN)

    @classmethod
    def _missing_(cls, value: object) -> FieldDataType:
        return cls.UNKNOWN


_TYPE_CODES = {
    1: FieldDataType.BOOLEAN,
    2: FieldDataType.DATE,
    3: FieldDataType.DOUBLE,
    4: FieldDataType.ENUM,
    5: FieldDataType.FLOAT,
    6: FieldDataType.INT32,
    7: FieldDataType.INT64,
    8: FieldDataType.MESSAGE,
    9: FieldDataType.RESOURCE_NAME,
    10: FieldDataType.STRING,
    11: FieldDataType.UINT64,
}
