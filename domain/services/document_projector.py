"""Domain service projecting catalog fields and curated examples into embeddable documents."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from domain.exceptions import ValidationError
from domain.value_objects.embeddable_document import Embeddable, EmbeddableDocument
from domain.value_objects.field_category import FieldCategory

if TYPE_CHECKING:
    from domain.value_objects.example_query import ExampleQuery
    from domain.value_objects.field_metadata import FieldMetadata
    from domain.value_objects.metadata_snapshot import MetadataSnapshot

FIELD_DESCRIPTION_VERSION = "field-description-v2"
"""Mixed into the field corpus hash; bump whenever description synthesis changes."""

# Ordered: the first matching keyword wins
_PURPOSE_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("conversion",), "tracking conversions and sales; key performance metrics"),
    (("click",), "tracking user clicks; key performance metrics"),
    (("interactions",), "tracking non-click forms of intentional user response to ad views"),
    (("impression share", "impression_share"), "tracking share of ad views; key performance metrics"),
    (("impression",), "tracking ad views; key performance metrics"),
    (("cost",), "tracking advertising costs; key performance metrics"),
    (("cpc",), "tracking advertising costs per click"),
    (("cpe",), "tracking advertising costs per engagement for social or video ads"),
    (("cpm",), "tracking advertising costs per thousand impressions for display ads"),
    (("cpv",), "tracking advertising costs per view for video ads"),
    (("budget",), "managing campaign budgets"),
    (("bid",), "managing bidding strategies"),
    (("status",), "checking entity status"),
    (("name",), "identifying entities"),
    (("date", "time"), "temporal analysis"),
    (("device",), "device-specific analysis"),
    (("location", "geo"), "geographic analysis"),
    (("search_term", "keyword"), "search query analysis"),
    (("asset",), "creative asset analysis"),
    (("audience", "demographic"), "audience targeting and analysis"),
)


def normalize_field_name(name: str) -> str:
    """Lower-case a dotted field path and expand its separators into spaces."""
    return name.lower().replace(".", " ").replace("_", " ")


def infer_purpose(name: str) -> str | None:
    lowered = name.lower()
    for keywords, purpose in _PURPOSE_HINTS:
        if any(keyword in lowered for keyword in keywords):
            return purpose
    return None


class FieldDocument:
    """Embeddable view of a catalog field."""

    def __init__(self, field: FieldMetadata) -> None:
        self.field = field

    def identity(self) -> str:
        return self.field.name

    def description(self) -> str:
        parts = [normalize_field_name(self.field.name)]

        hint = self._type_hint()
        if hint:
            parts.append(hint)

        purpose = infer_purpose(self.field.name)
        if purpose:
            parts.append(f"used for {purpose}")

        return ", ".join(parts)

    def payload(self) -> dict[str, Any]:
        return {
            "category": self.field.category.value,
            "data_type": self.field.data_type.value,
            "selectable": self.field.selectable,
            "filterable": self.field.filterable,
            "sortable": self.field.sortable,
            "metrics_compatible": self.field.metrics_compatible,
            "resource_name": self.field.resource_name,
        }

    def _type_hint(self) -> str:
        data_type = self.field.data_type.value.lower().replace("_", " ")
        if self.field.category == FieldCategory.UNKNOWN:
            return "" if data_type == "unknown" else f"{data_type} value"
        category = self.field.category.value.lower()
        if data_type == "unknown":
            return category
        return f"{category} of type {data_type}"


class DocumentProjector:
    """Turns entities into the uniform document shape used by the embedding pipeline.

    Works on anything implementing ``Embeddable``; the two corpora (catalog
    fields and curated examples) only differ in which entities they feed in.
    """

    @staticmethod
    def project(entities: Iterable[Embeddable]) -> list[EmbeddableDocument]:
        """Project entities, rejecting duplicate ids within the corpus.

        Raises:
            ValidationError: If two entities share an id

        """
        documents: list[EmbeddableDocument] = []
        seen: set[str] = set()
        for entity in entities:
            document = EmbeddableDocument.from_entity(entity)
            if document.id in seen:
                msg = f"Duplicate document id in corpus: {document.id}"
                raise ValidationError(msg)
            seen.add(document.id)
            documents.append(document)
        return documents

    @classmethod
    def project_fields(cls, snapshot: MetadataSnapshot) -> list[EmbeddableDocument]:
        return cls.project(FieldDocument(field) for field in snapshot.fields.values())

    @classmethod
    def project_examples(cls, examples: Iterable[ExampleQuery]) -> list[EmbeddableDocument]:
        return cls.project(examples)
