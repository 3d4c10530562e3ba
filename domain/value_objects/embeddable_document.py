from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator


@runtime_checkable
class Embeddable(Protocol):
    """Capability shared by every entity kind that can be projected into a document."""

    def identity(self) -> str:
        """Stable id, unique within the entity's corpus."""
        ...

    def description(self) -> str:
        """Free text that gets embedded."""
        ...

    def payload(self) -> dict[str, Any]:
        """Structured columns stored next to the vector."""
        ...


class EmbeddableDocument(BaseModel):
    """Uniform document shape fed to the embedding function and the vector store."""

    id: str
    """Unique within a corpus. Stores are keyed by it; document order carries no meaning."""

    description: str
    """Text that is embedded and matched against free-text queries."""

    payload: dict[str, Any] = Field(default_factory=dict)
    """Entity-specific columns (e.g. the literal example query)."""

    model_config = {"frozen": True}

    @field_validator("id")
    @classmethod
    def validate_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Document id cannot be empty"
            raise ValueError(msg)
        return v

    @classmethod
    def from_entity(cls, entity: Embeddable) -> EmbeddableDocument:
        return cls(id=entity.identity(), description=entity.description(), payload=entity.payload())


class VectorRecord(BaseModel):
    """A document's id and payload joined with its embedding vector."""

    id: str
    description: str
    payload: dict[str, Any] = Field(default_factory=dict)
    vector: list[float]

    @field_validator("vector")
    @classmethod
    def validate_vector_not_empty(cls, v: list[float]) -> list[float]:
        if not v:
            msg = "Record vector cannot be empty"
            raise ValueError(msg)
        return v

    @property
    def dimensions(self) -> int:
        return len(self.vector)
