"""Tests for embedding generators."""

import numpy as np
import pytest
from unittest.mock import AsyncMock, Mock, patch
from openai import OpenAIError

from hirechat.exceptions import EmbeddingError
from hirechat.services.embedding_service import (
    OpenAIEmbedder,
    SentenceTransformerEmbedder,
    create_embedding_generator,
)


class TestSentenceTransformerEmbedder:
    """Test cases for the local sentence-transformers embedder."""

    def setup_method(self):
        self.embedder = SentenceTransformerEmbedder("test-model", dimension=2)

    @pytest.mark.asyncio
    async def test_embed_normalizes_vector(self):
        """Test local embeddings are unit length."""
        with patch("hirechat.services.embedding_service.SentenceTransformer") as mock_model_cls:
            mock_model_cls.return_value.encode.return_value = np.array([3.0, 4.0])

            vector = await self.embedder.embed("Python developer")

        assert vector == pytest.approx([0.6, 0.8])
        mock_model_cls.assert_called_once_with("test-model")

    @pytest.mark.asyncio
    async def test_embed_collapses_whitespace(self):
        """Test whitespace is collapsed before encoding."""
        with patch("hirechat.services.embedding_service.SentenceTransformer") as mock_model_cls:
            mock_model_cls.return_value.encode.return_value = np.array([1.0, 0.0])

            await self.embedder.embed("  senior \n\n backend   engineer ")

        mock_model_cls.return_value.encode.assert_called_once_with("senior backend engineer", convert_to_numpy=True)

    @pytest.mark.asyncio
    async def test_embed_empty_text(self):
        """Test empty text cannot be embedded."""
        with pytest.raises(EmbeddingError, match="empty"):
            await self.embedder.embed("   ")

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self):
        """Test a vector of the wrong dimension is rejected."""
        with patch("hirechat.services.embedding_service.SentenceTransformer") as mock_model_cls:
            mock_model_cls.return_value.encode.return_value = np.array([1.0, 0.0, 0.0])

            with pytest.raises(EmbeddingError):
                await self.embedder.embed("text")

    @pytest.mark.asyncio
    async def test_model_failure(self):
        """Test a model error surfaces as an embedding error."""
        with patch("hirechat.services.embedding_service.SentenceTransformer") as mock_model_cls:
            mock_model_cls.return_value.encode.side_effect = RuntimeError("CUDA out of memory")

            with pytest.raises(EmbeddingError):
                await self.embedder.embed("text")


class TestOpenAIEmbedder:
    """Test cases for the OpenAI embedder."""

    def setup_method(self):
        self.client = Mock()
        self.client.embeddings.create = AsyncMock()
        self.embedder = OpenAIEmbedder("text-embedding-3-small", dimension=3, api_key="", client=self.client)

    @pytest.mark.asyncio
    async def test_embed_success(self):
        """Test a remote embedding is returned as a list of floats."""
        self.client.embeddings.create.return_value = Mock(data=[Mock(embedding=[0.1, 0.2, 0.3])])

        vector = await self.embedder.embed("Data engineer")

        assert vector == [0.1, 0.2, 0.3]
        self.client.embeddings.create.assert_awaited_once_with(model="text-embedding-3-small", input="Data engineer")

    @pytest.mark.asyncio
    async def test_upstream_error(self):
        """Test an upstream API error surfaces as an embedding error."""
        self.client.embeddings.create.side_effect = OpenAIError("quota exceeded")

        with pytest.raises(EmbeddingError):
            await self.embedder.embed("Data engineer")

    @pytest.mark.asyncio
    async def test_empty_response(self):
        """Test a response without data is an embedding error."""
        self.client.embeddings.create.return_value = Mock(data=[])

        with pytest.raises(EmbeddingError):
            await self.embedder.embed("Data engineer")

    def test_requires_api_key_without_client(self):
        """Test the remote embedder needs an API key."""
        with pytest.raises(EmbeddingError, match="OPENAI_API_KEY"):
            OpenAIEmbedder("text-embedding-3-small", dimension=3, api_key="")


class TestCreateEmbeddingGenerator:
    """Test cases for provider selection."""

    def _settings(self, provider):
        return Mock(
            embedding_provider=provider,
            vector_model_name="model",
            embedding_dimension=4,
            openai_api_key="sk-test",
            openai_timeout=30.0,
            openai_max_retries=3,
        )

    def test_sentence_transformers_provider(self):
        """Test the local provider is selected by name."""
        generator = create_embedding_generator(self._settings("sentence-transformers"))
        assert isinstance(generator, SentenceTransformerEmbedder)
        assert generator.dimension == 4

    def test_openai_provider(self):
        """Test the OpenAI provider is selected by name."""
        generator = create_embedding_generator(self._settings("OpenAI"))
        assert isinstance(generator, OpenAIEmbedder)
        assert generator.model_name == "model"

    def test_unknown_provider(self):
        """Test an unknown provider name is rejected."""
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            create_embedding_generator(self._settings("word2vec"))
