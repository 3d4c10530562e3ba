from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Literal

import structlog

from application.ports.embedding_generator import EmbeddingGenerator
from domain.value_objects.text_embedding import TextEmbedding

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = structlog.get_logger()


class SentenceTransformerGenerator(EmbeddingGenerator):
    """EmbeddingGenerator backed by a local sentence-transformers model.

    Vectors are L2-normalized so cosine similarity in the vector store is
    well defined. Encoding runs in a worker thread to keep the event loop
    free while a corpus is being embedded.

    The default BAAI/bge-base-en-v1.5 produces 768-dimensional vectors.
    """

    def __init__(
        self,
        model_name: str = "BAAI/bge-base-en-v1.5",
        device: Literal["cpu", "cuda", "mps"] = "cpu",
        batch_size: int = 64,
    ) -> None:
        self._model_name = model_name
        self.device = self._resolve_device(device)
        self.batch_size = batch_size

        logger.info(
            "initializing_sentence_transformer",
            model_name=model_name,
            device=self.device,
        )

        # Loaded on first use
        self._model: SentenceTransformer | None = None
        self._dimensions: int | None = None

    @property
    def model_name(self) -> str:
        return self._model_name

    def _resolve_device(self, device: str) -> str:
        import torch  # heavy import, deferred until first instantiation

        if device == "cuda" and not torch.cuda.is_available():
            logger.warning("cuda_not_available_falling_back_to_cpu")
            return "cpu"
        if device == "mps" and not torch.backends.mps.is_available():
            logger.warning("mps_not_available_falling_back_to_cpu")
            return "cpu"
        return device

    def _ensure_model_loaded(self) -> SentenceTransformer:
        if self._model is None:
            from sentence_transformers import SentenceTransformer  # heavy import, deferred until first use

            logger.info("loading_sentence_transformer_model", model_name=self._model_name)
            self._model = SentenceTransformer(self._model_name, device=self.device)
            self._dimensions = self._model.get_sentence_embedding_dimension()
            logger.info("model_loaded", model_name=self._model_name, dimensions=self._dimensions)
        return self._model

    def _encode(self, texts: list[str]) -> list[list[float]]:
        model = self._ensure_model_loaded()
        return model.encode(
            texts,
            batch_size=self.batch_size,
            normalize_embeddings=True,
            convert_to_tensor=False,
            show_progress_bar=False,
        ).tolist()

    def _to_embedding(self, vector: list[float]) -> TextEmbedding:
        return TextEmbedding(vector=vector, model_name=self._model_name, dimensions=len(vector))

    async def generate_text_embedding(self, text: str) -> TextEmbedding:
        """Embed a single query text.

        Raises:
            ValueError: If text is empty

        """
        if not text or not text.strip():
            msg = "Text cannot be empty"
            raise ValueError(msg)

        vectors = await asyncio.to_thread(self._encode, [text])
        logger.debug("embedding_generated", text_length=len(text), dimensions=len(vectors[0]))
        return self._to_embedding(vectors[0])

    async def generate_batch_embeddings(self, texts: list[str]) -> list[TextEmbedding]:
        """Embed a whole corpus, preserving input order.

        Raises:
            ValueError: If texts is empty or any text is empty

        """
        if not texts:
            msg = "Texts list cannot be empty"
            raise ValueError(msg)

        for i, text in enumerate(texts):
            if not text or not text.strip():
                msg = f"Text at index {i} cannot be empty"
                raise ValueError(msg)

        logger.info("generating_batch_embeddings", count=len(texts), model_name=self._model_name)
        vectors = await asyncio.to_thread(self._encode, texts)

        embeddings = [self._to_embedding(vector) for vector in vectors]
        logger.info(
            "batch_embeddings_generated",
            count=len(embeddings),
            dimensions=embeddings[0].dimensions,
        )
        return embeddings

    async def get_model_info(self) -> dict[str, str | int]:
        await asyncio.to_thread(self._ensure_model_loaded)
        return {
            "model_name": self._model_name,
            "dimensions": self._dimensions or 0,
            "provider": "sentence-transformers",
            "device": self.device,
        }
