"""Shared fixtures: in-memory database and test doubles for external services."""

import hashlib
import math
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hirechat.exceptions import EmbeddingError
from hirechat.models.database import Base
from hirechat.models.search import VectorMatch
from hirechat.models.user import UserRole
from hirechat.services.embedding_service import EmbeddingGenerator
from hirechat.services.llm_client import LLMClient
from hirechat.services.object_storage import LocalObjectStorage
from hirechat.services.profile_store import ProfileStore

TEST_SECRET = "test-secret-key"


class FakeEmbedder(EmbeddingGenerator):
    """Deterministic embedder that records every text it is asked to embed."""

    def __init__(self, dimension: int = 8):
        super().__init__("fake-embedding-model", dimension)
        self.calls: List[str] = []
        self.errors: List[Exception] = []

    async def _embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.errors:
            raise self.errors.pop(0)
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(b + 1) / 256.0 for b in digest[:self.dimension]]


class InMemoryVectorIndex:
    """Vector index double with overwrite semantics and scripted failures."""

    def __init__(self):
        self.points: Dict[str, Tuple[List[float], dict]] = {}
        self.search_results: Optional[List[VectorMatch]] = None
        self.upsert_errors: List[Exception] = []
        self.search_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None
        self.ensure_calls = 0
        self.upsert_calls = 0
        self.search_calls = 0

    async def ensure_collection(self, name=None, dimension=None, metric="cosine"):
        self.ensure_calls += 1

    async def upsert(self, point_id, vector, payload=None):
        self.upsert_calls += 1
        if self.upsert_errors:
            raise self.upsert_errors.pop(0)
        self.points[point_id] = (list(vector), dict(payload or {}))

    async def search(self, vector, k, filters=None):
        self.search_calls += 1
        if self.search_error is not None:
            raise self.search_error
        if self.search_results is not None:
            return self.search_results[:k]

        def cosine(a, b):
            dot = sum(x * y for x, y in zip(a, b))
            norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
            return dot / norm if norm else 0.0

        matches = [
            VectorMatch(point_id=point_id, similarity=cosine(vector, stored), payload=payload)
            for point_id, (stored, payload) in self.points.items()
        ]
        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:k]

    async def delete(self, point_id):
        if self.delete_error is not None:
            raise self.delete_error
        return self.points.pop(point_id, None) is not None


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def profile_factory(db_session):
    """Create profiles directly in the store."""
    counter = {"n": 0}

    def _create(name="Test User", role=UserRole.CANDIDATE, role_selected=True, **fields):
        counter["n"] += 1
        return ProfileStore.admin(db_session).insert(
            name=name,
            email=fields.pop("email", f"user{counter['n']}@example.com"),
            password_hash="not-a-real-hash",
            role=role,
            role_selected=role_selected,
            **fields,
        )

    return _create


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def vector_index():
    return InMemoryVectorIndex()


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(
        root_dir=str(tmp_path / "resumes"),
        public_base_url="http://testserver",
        secret_key=TEST_SECRET,
    )


@pytest.fixture
def llm():
    """LLM client double answering with a fixed shortlist."""
    client = Mock(spec=LLMClient)
    client.available = True
    client.complete = AsyncMock(return_value="These are the top relevant candidates according to your requirements")
    return client
