"""Similarity retrieval over the field catalog and query cookbook indexes."""

from __future__ import annotations

import structlog

from application.dtos.retrieval_dtos import ExampleQueryHit
from application.ports.embedding_generator import EmbeddingGenerator
from application.ports.vector_store import VectorIndex, VectorSearchHit
from domain.value_objects.field_metadata import FieldMetadata
from domain.value_objects.metadata_snapshot import MetadataSnapshot

logger = structlog.get_logger()

EXAMPLE_CONTEXT_HEADER = "RELEVANT EXAMPLE QUERIES:\n\n"
RELEVANT_FIELDS_HEADER = "RELEVANT FIELDS FOR YOUR QUERY:\n\n"
LIKELY_RESOURCES_HEADER = "LIKELY RESOURCES:\n"
TEMPORAL_HINT = "TEMPORAL ANALYSIS DETECTED - Include segments.date\n\n"

# Checked in order against the lowercased request; "ad " needs the trailing space
RESOURCE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("campaign",), "campaign"),
    (("ad group", "adgroup"), "ad_group"),
    (("keyword",), "keyword_view"),
    (("search term",), "search_term_view"),
    (("ad ", "ads "), "ad_group_ad"),
    (("asset",), "asset"),
)
DEFAULT_RESOURCE = "campaign"
TEMPORAL_KEYWORDS = ("last", "week", "month", "trend", "over time")


class RetrievalService:
    """Answers free-text similarity queries against an opened vector index.

    Queries are embedded with the same generator that built the indexes; an
    index built by any other model is refused rather than searched.
    """

    def __init__(self, embedding_generator: EmbeddingGenerator) -> None:
        self.embedding_generator = embedding_generator

    async def search(self, store: VectorIndex, query_text: str, k: int) -> list[VectorSearchHit]:
        """Return the ``min(k, size)`` nearest records, by descending similarity.

        Raises:
            EmbeddingModelMismatchError: If the store was built by another model
            DimensionMismatchError: If the query vector width differs from the store's

        """
        if k <= 0:
            return []

        manifest = store.manifest
        query_embedding = await self.embedding_generator.generate_text_embedding(query_text)
        query_embedding.ensure_comparable(manifest.model_name, manifest.dimensions)

        hits = await store.search(query_embedding.vector, limit=k)

        logger.debug(
            "retrieval_search_complete",
            store=manifest.name,
            k=k,
            results_count=len(hits),
        )
        return hits

    async def suggest_fields(
        self,
        snapshot: MetadataSnapshot,
        store: VectorIndex,
        topic: str,
        k: int,
    ) -> list[FieldMetadata]:
        """Catalog fields most similar to ``topic``, in retrieval order.

        Ids the snapshot no longer knows are dropped; the index and the
        catalog are refreshed independently and may briefly disagree.
        """
        hits = await self.search(store, topic, k)

        fields = []
        for hit in hits:
            field = snapshot.get_field(hit.id)
            if field is None:
                logger.warning("retrieval_field_not_in_snapshot", field_name=hit.id, score=hit.score)
                continue
            fields.append(field)

        logger.info("fields_suggested", topic=topic[:100], suggested_count=len(fields))
        return fields

    async def example_context(self, store: VectorIndex, text: str, n: int) -> list[ExampleQueryHit]:
        """Top ``n`` curated examples for a natural-language request."""
        hits = await self.search(store, text, n)
        examples = [
            ExampleQueryHit(
                example_id=hit.id,
                similarity_score=hit.score,
                description=str(hit.payload.get("description", "")),
                query=str(hit.payload.get("query", "")),
            )
            for hit in hits
        ]

        logger.info("example_context_retrieved", request=text[:100], examples_count=len(examples))
        return examples

    @staticmethod
    def identify_resources(text: str) -> list[str]:
        """Resources a request most likely queries, by keyword; ``campaign`` when none match."""
        lowered = text.lower()
        resources = [
            resource
            for keywords, resource in RESOURCE_KEYWORDS
            if any(keyword in lowered for keyword in keywords)
        ]
        return resources or [DEFAULT_RESOURCE]

    @staticmethod
    def build_query_context(snapshot: MetadataSnapshot, text: str) -> str:
        """Likely resources with their field counts, plus a date hint for time-based requests.

        Resources the snapshot does not know are still listed, with zero fields.
        """
        context = LIKELY_RESOURCES_HEADER
        for resource in RetrievalService.identify_resources(text):
            context += f"- {resource}: {len(snapshot.get_resource_fields(resource))} fields available\n"
        context += "\n"

        lowered = text.lower()
        if any(keyword in lowered for keyword in TEMPORAL_KEYWORDS):
            context += TEMPORAL_HINT

        return context

    @staticmethod
    def format_example_context(examples: list[ExampleQueryHit]) -> str:
        """Render examples as the few-shot block handed to text generation."""
        context = EXAMPLE_CONTEXT_HEADER
        for example in examples:
            context += (
                f"Example (relevance: {example.similarity_score:.3f}):\n"
                f"Description: {example.description}\n"
                f"Query: {example.query}\n\n"
            )
        return context

    @staticmethod
    def format_relevant_fields(fields: list[FieldMetadata]) -> str:
        """Group fields into Metrics / Segments / Attributes blocks, each sorted by name."""
        if not fields:
            return ""

        def selectable(field: FieldMetadata) -> str:
            return "selectable" if field.selectable else "not selectable"

        lines = [RELEVANT_FIELDS_HEADER.rstrip("\n"), ""]

        metrics = sorted((f for f in fields if f.is_metric), key=lambda f: f.name)
        if metrics:
            lines.append("Metrics:")
            lines.extend(f"- {f.name}: {f.data_type.value} ({selectable(f)})" for f in metrics)
            lines.append("")

        segments = sorted((f for f in fields if f.is_segment), key=lambda f: f.name)
        if segments:
            lines.append("Segments:")
            lines.extend(f"- {f.name}: {f.data_type.value}" for f in segments)
            lines.append("")

        attributes = sorted((f for f in fields if f.is_attribute), key=lambda f: f.name)
        if attributes:
            lines.append("Attributes:")
            lines.extend(
                f"- {f.name}: {f.data_type.value} "
                f"({selectable(f)}{', filterable' if f.filterable else ''})"
                for f in attributes
            )
            lines.append("")

        return "\n".join(lines) + "\n"
