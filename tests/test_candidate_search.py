"""Tests for the candidate search pipeline."""

import pytest
from unittest.mock import patch

from hirechat.exceptions import EmbeddingError, IndexTimeout, StoreError
from hirechat.models.search import VectorMatch
from hirechat.models.user import UserRole
from hirechat.services.candidate_search import CandidateSearchService
from hirechat.services.profile_store import ProfileStore


@pytest.fixture
def search_service(db_session, embedder, vector_index):
    return CandidateSearchService(embedder, vector_index, ProfileStore.admin(db_session))


class TestCandidateSearch:
    """Test cases for CandidateSearchService."""

    @pytest.mark.asyncio
    async def test_missing_profiles_are_dropped_and_order_is_by_similarity(
        self, search_service, vector_index, profile_factory
    ):
        """Test matches without profiles are dropped and results sort by similarity."""
        a = profile_factory("Alice")
        c = profile_factory("Carol")
        vector_index.search_results = [
            VectorMatch(point_id=c.id, similarity=0.6),
            VectorMatch(point_id="deleted-b", similarity=0.75),
            VectorMatch(point_id=a.id, similarity=0.9),
        ]

        results = await search_service.search("python developer", limit=10)

        assert [(m.profile.id, m.similarity) for m in results] == [(a.id, 0.9), (c.id, 0.6)]

    @pytest.mark.asyncio
    async def test_equal_scores_keep_index_order(self, search_service, vector_index, profile_factory):
        """Test equal similarities keep the index order."""
        first = profile_factory("First")
        second = profile_factory("Second")
        vector_index.search_results = [
            VectorMatch(point_id=second.id, similarity=0.8),
            VectorMatch(point_id=first.id, similarity=0.8),
        ]

        results = await search_service.search("engineer")

        assert [m.profile.id for m in results] == [second.id, first.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    async def test_blank_query_makes_no_external_calls(self, search_service, embedder, vector_index, query):
        """Test a blank query returns nothing without embedding or searching."""
        outcome = await search_service.run(query)

        assert outcome.candidates == []
        assert outcome.vector_hits == 0
        assert embedder.calls == []
        assert vector_index.search_calls == 0

    @pytest.mark.asyncio
    async def test_recruiters_are_never_returned(self, search_service, vector_index, profile_factory):
        """Test recruiter profiles are filtered out of results."""
        recruiter = profile_factory("Rita", role=UserRole.RECRUITER)
        vector_index.search_results = [VectorMatch(point_id=recruiter.id, similarity=0.95)]

        outcome = await search_service.run("hiring manager")

        assert outcome.vector_hits == 1
        assert outcome.candidates == []

    @pytest.mark.asyncio
    async def test_no_matches(self, search_service, vector_index):
        """Test an empty index gives an empty outcome."""
        vector_index.search_results = []

        outcome = await search_service.run("rust embedded engineer")

        assert outcome.vector_hits == 0
        assert outcome.candidates == []

    @pytest.mark.asyncio
    async def test_limit_is_passed_to_index(self, search_service, vector_index, profile_factory):
        """Test the limit is passed through to the index."""
        profiles = [profile_factory(f"Candidate {i}") for i in range(5)]
        vector_index.search_results = [
            VectorMatch(point_id=p.id, similarity=0.9 - i * 0.1) for i, p in enumerate(profiles)
        ]

        results = await search_service.search("engineer", limit=2)

        assert [m.profile.id for m in results] == [profiles[0].id, profiles[1].id]

    @pytest.mark.asyncio
    async def test_embedding_failure_degrades_to_empty(self, search_service, embedder):
        """Test an embedding failure returns no results."""
        embedder.errors = [EmbeddingError()]

        assert await search_service.search("python developer") == []

    @pytest.mark.asyncio
    async def test_index_timeout_degrades_to_empty(self, search_service, vector_index):
        """Test an index timeout returns no results."""
        vector_index.search_error = IndexTimeout()

        assert await search_service.search("python developer") == []

    @pytest.mark.asyncio
    async def test_store_failure_degrades_to_empty(self, search_service, vector_index):
        """Test a profile store failure returns an empty outcome."""
        vector_index.search_results = [VectorMatch(point_id="any", similarity=0.9)]

        with patch.object(search_service.profiles, "get_many", side_effect=StoreError()):
            outcome = await search_service.run("python developer")

        assert outcome.candidates == []
        assert outcome.vector_hits == 0

    @pytest.mark.asyncio
    async def test_unexpected_index_exception_degrades_to_empty(self, search_service, vector_index):
        """Test an untyped index failure returns an empty outcome."""
        vector_index.search_error = RuntimeError("socket closed")

        outcome = await search_service.run("python developer")

        assert outcome.candidates == []
        assert outcome.vector_hits == 0
