"""Domain exceptions for cache, catalog and retrieval failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.value_objects.validation_result import ValidationResult


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class CacheNotFoundError(DomainError):
    """Raised when a cached artifact (snapshot, fingerprint, store) is absent.

    Not fatal: callers fall through to the fetch/rebuild path.
    """


class CacheCorruptError(DomainError):
    """Raised when a cached artifact exists but cannot be read or deserialized.

    Callers log a warning and treat it exactly like a stale cache.
    """


class SnapshotNotFoundError(CacheNotFoundError):
    """Raised when no metadata snapshot exists at the requested path."""


class SnapshotCorruptError(CacheCorruptError):
    """Raised when a metadata snapshot file cannot be parsed."""


class VectorStoreNotFoundError(CacheNotFoundError):
    """Raised when a named vector store has never been written."""


class VectorStoreCorruptError(CacheCorruptError):
    """Raised when a named vector store exists but cannot be opened."""


class CatalogUnavailableError(DomainError):
    """Raised when there is neither a usable snapshot nor a way to fetch one."""


class FieldSelectionError(DomainError):
    """Raised when a field selection references unknown or non-selectable fields."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(result.format_message().strip())
        self.result = result


class DimensionMismatchError(DomainError):
    """Raised when a vector's width differs from the store's configured width."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimension mismatch: store expects {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class EmbeddingModelMismatchError(DomainError):
    """Raised when a query is embedded with a different model than the store."""

    def __init__(self, store_model: str, query_model: str) -> None:
        super().__init__(
            f"Store was built with embedding model '{store_model}', "
            f"refusing to query it with '{query_model}'",
        )
        self.store_model = store_model
        self.query_model = query_model
