from datetime import UTC, datetime

from pydantic import BaseModel, Field, model_validator

from domain.exceptions import DimensionMismatchError, EmbeddingModelMismatchError


class TextEmbedding(BaseModel):
    """A text's embedding vector tagged with the model that produced it.

    Vectors from different models live in unrelated spaces, so every
    comparison goes through ``ensure_comparable`` first.
    """

    vector: list[float]
    model_name: str
    dimensions: int
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def validate_shape(self) -> "TextEmbedding":
        if not self.vector:
            msg = "Embedding vector cannot be empty"
            raise ValueError(msg)
        if self.dimensions != len(self.vector):
            msg = (
                f"Declared dimensions ({self.dimensions}) don't match "
                f"vector length ({len(self.vector)})"
            )
            raise ValueError(msg)
        if not self.model_name.strip():
            msg = "Model name cannot be empty"
            raise ValueError(msg)
        return self

    def ensure_comparable(self, model_name: str, dimensions: int) -> None:
        """Raise unless this embedding can be compared with vectors of that model and width."""
        if self.model_name != model_name:
            raise EmbeddingModelMismatchError(store_model=model_name, query_model=self.model_name)
        if self.dimensions != dimensions:
            raise DimensionMismatchError(expected=dimensions, actual=self.dimensions)
