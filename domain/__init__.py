"""Domain layer exports."""

from domain.exceptions import DomainError, ValidationError
from domain.value_objects import (
    CacheFingerprint,
    EmbeddableDocument,
    ExampleQuery,
    FieldCategory,
    FieldDataType,
    FieldMetadata,
    MetadataSnapshot,
    ValidationResult,
    VectorRecord,
)

__all__ = [
    "CacheFingerprint",
    "DomainError",
    "EmbeddableDocument",
    "ExampleQuery",
    "FieldCategory",
    "FieldDataType",
    "FieldMetadata",
    "MetadataSnapshot",
    "ValidationError",
    "ValidationResult",
    "VectorRecord",
]
