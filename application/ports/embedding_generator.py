from typing import Protocol

from domain.value_objects.text_embedding import TextEmbedding


class EmbeddingGenerator(Protocol):
    """Port for generating embeddings from text content.

    This is a protocol (interface) that defines what the application layer
    expects from an embedding generator, without coupling to any specific
    implementation (sentence-transformers, a hosted API, etc.).

    Calls may be slow or rate-limited; callers only embed a corpus when the
    embedding cache reports it stale.
    """

    @property
    def model_name(self) -> str:
        """Identifier of the model (and version) producing the vectors."""
        ...

    async def generate_text_embedding(self, text: str) -> TextEmbedding:
        """Generate an embedding vector for the given text.

        Raises:
            ValueError: If text is empty or invalid

        """
        ...

    async def generate_batch_embeddings(self, texts: list[str]) -> list[TextEmbedding]:
        """Generate embedding vectors for multiple texts in a batch.

        Returns:
            List of TextEmbedding objects, one per input text (same order)

        Raises:
            ValueError: If any text is empty or invalid

        """
        ...

    async def get_model_info(self) -> dict[str, str | int]:
        """Get information about the current embedding model.

        Returns:
            Dictionary with model_name, dimensions, and provider info

        """
        ...
