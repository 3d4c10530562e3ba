from .cache_fingerprint import CacheFingerprint
from .embeddable_document import EmbeddableDocument, VectorRecord
from .example_query import ExampleQuery
from .field_category import FieldCategory
from .field_data_type import FieldDataType
from .field_metadata import FieldMetadata
from .metadata_snapshot import MetadataSnapshot
from .validation_result import ValidationResult

__all__ = [
    "CacheFingerprint",
    "EmbeddableDocument",
    "ExampleQuery",
    "FieldCategory",
    "FieldDataType",
    "FieldMetadata",
    "MetadataSnapshot",
    "ValidationResult",
    "VectorRecord",
]
