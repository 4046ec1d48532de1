"""Embedding generation for resumes and search queries."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np
from openai import AsyncOpenAI, OpenAIError
from sentence_transformers import SentenceTransformer

from ..config import Settings
from ..exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """
    Turns text into a fixed-length dense vector.

    A single instance is shared by ingestion and search so both sides use
    the same model; vectors from different models are not comparable.
    """

    def __init__(self, model_name: str, dimension: int):
        self.model_name = model_name
        self.dimension = dimension

    async def embed(self, text: str) -> List[float]:
        """
        Generate an embedding for the given text.

        Raises:
            EmbeddingError: If text is empty or the model call fails
        """
        if not text or not text.strip():
            raise EmbeddingError("Text content cannot be empty")

        # Remove excessive whitespace before embedding
        cleaned_text = " ".join(text.strip().split())
        vector = await self._embed(cleaned_text)

        if len(vector) != self.dimension:
            logger.error(
                f"Embedding model {self.model_name} returned {len(vector)} dimensions, "
                f"expected {self.dimension}"
            )
            raise EmbeddingError()
        return vector

    async def _embed(self, text: str) -> List[float]:
        raise NotImplementedError


class SentenceTransformerEmbedder(EmbeddingGenerator):
    """Local sentence-transformers model, run off the event loop."""

    def __init__(self, model_name: str, dimension: int, executor: Optional[ThreadPoolExecutor] = None):
        super().__init__(model_name, dimension)
        self._model: Optional[SentenceTransformer] = None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)

    def _get_model(self) -> SentenceTransformer:
        """
        Lazy load the sentence transformer model.

        Returns:
            Loaded sentence transformer model
        """
        if self._model is None:
            logger.info(f"Loading sentence transformer model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
            logger.info("Model loaded successfully")
        return self._model

    def _encode(self, text: str) -> List[float]:
        model = self._get_model()
        vector = model.encode(text, convert_to_numpy=True)

        # Ensure vector is normalized (unit length)
        vector_norm = np.linalg.norm(vector)
        if vector_norm > 0:
            vector = vector / vector_norm
        return vector.astype(float).tolist()

    async def _embed(self, text: str) -> List[float]:
        loop = asyncio.get_running_loop()
        try:
            vector = await loop.run_in_executor(self._executor, self._encode, text)
        except Exception as e:
            logger.error(f"Vector generation failed: {e}")
            raise EmbeddingError()

        logger.info(f"Generated vector with {len(vector)} dimensions using {self.model_name}")
        return vector


class OpenAIEmbedder(EmbeddingGenerator):
    """Remote OpenAI embedding model. Transient errors are retried by the client."""

    def __init__(
        self,
        model_name: str,
        dimension: int,
        api_key: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        client: Optional[AsyncOpenAI] = None,
    ):
        super().__init__(model_name, dimension)
        if client is None and not api_key:
            raise EmbeddingError("OPENAI_API_KEY is required for the openai embedding provider")
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)

    async def _embed(self, text: str) -> List[float]:
        try:
            response = await self._client.embeddings.create(model=self.model_name, input=text)
        except OpenAIError as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise EmbeddingError()

        if not response.data:
            logger.error("OpenAI embedding response contained no data")
            raise EmbeddingError()

        vector = list(response.data[0].embedding)
        logger.info(f"Generated vector with {len(vector)} dimensions using {self.model_name}")
        return vector


def create_embedding_generator(settings: Settings) -> EmbeddingGenerator:
    """
    Build the configured embedding generator.

    Args:
        settings: Application settings

    Returns:
        EmbeddingGenerator for the configured provider
    """
    provider = settings.embedding_provider.lower()
    if provider == "openai":
        return OpenAIEmbedder(
            model_name=settings.vector_model_name,
            dimension=settings.embedding_dimension,
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
            max_retries=settings.openai_max_retries,
        )
    if provider == "sentence-transformers":
        return SentenceTransformerEmbedder(
            model_name=settings.vector_model_name,
            dimension=settings.embedding_dimension,
        )
    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")
