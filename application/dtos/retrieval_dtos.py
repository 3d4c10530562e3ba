from pydantic import BaseModel, Field

from domain.value_objects.field_metadata import FieldMetadata


class FieldSuggestionRequest(BaseModel):
    """Request for catalog fields relevant to a free-text topic."""

    topic: str = Field(..., min_length=1)
    limit: int = Field(default=10, ge=1, le=100)


class FieldSuggestionResponse(BaseModel):
    topic: str
    fields: list[FieldMetadata]
    formatted: str = Field(description="Fields grouped by kind, ready to splice into a prompt")
    query_context: str = Field(default="", description="Likely resources and a date hint for the topic")


class ExampleContextRequest(BaseModel):
    """Request for curated examples similar to a natural-language query request."""

    request_text: str = Field(..., min_length=1)
    limit: int = Field(default=3, ge=1, le=50)


class ExampleQueryHit(BaseModel):
    """A curated example returned as few-shot context."""

    example_id: str
    similarity_score: float
    description: str
    query: str


class ExampleContextResponse(BaseModel):
    request_text: str
    examples: list[ExampleQueryHit]
    context: str = Field(description="Few-shot block for the downstream text-generation step")


class RetrievalIndexesResponse(BaseModel):
    """Outcome of preparing both retrieval indexes."""

    field_count: int
    example_count: int
    field_index_rebuilt: bool
    example_index_rebuilt: bool
