"""Candidate search: query embedding, vector search and profile join."""

import logging
from typing import List

from ..exceptions import HireChatError
from ..models.search import CandidateMatch, SearchOutcome
from ..models.user import UserRole
from .embedding_service import EmbeddingGenerator
from .profile_store import ProfileStore
from .vector_index import VectorIndex

logger = logging.getLogger(__name__)


class CandidateSearchService:
    """
    Ranks candidate profiles against a free-text query.

    This is the one search path in the application: the recruiter search
    endpoint and the shortlisting orchestrator both call into it. The
    caller is responsible for checking that the requester is a recruiter.
    """

    def __init__(self, embedder: EmbeddingGenerator, index: VectorIndex, profiles: ProfileStore):
        self.embedder = embedder
        self.index = index
        self.profiles = profiles

    async def search(self, query: str, limit: int = 10) -> List[CandidateMatch]:
        """
        Return candidates most similar to the query, highest similarity first.

        Args:
            query: Free-text search query
            limit: Maximum number of vector matches to consider

        Returns:
            Joined and sorted candidate matches; empty on any failure
        """
        outcome = await self.run(query, limit)
        return outcome.candidates

    async def run(self, query: str, limit: int = 10) -> SearchOutcome:
        """
        Run a search and report how many raw vector matches it found.

        Every stage failure degrades to an empty outcome.
        """
        if not query or not query.strip():
            return SearchOutcome()

        try:
            query_vector = await self.embedder.embed(query)
            matches = await self.index.search(query_vector, limit)
            if not matches:
                logger.info("Vector search returned no matches")
                return SearchOutcome()

            profiles = self.profiles.get_many([m.point_id for m in matches], role=UserRole.CANDIDATE)
        except HireChatError as e:
            logger.warning(f"Candidate search degraded to empty result: {e.__class__.__name__}: {e.message}")
            return SearchOutcome()
        except Exception as e:
            logger.error(f"Candidate search failed unexpectedly: {e.__class__.__name__}: {e}")
            return SearchOutcome()

        profiles_by_id = {profile.id: profile for profile in profiles}
        candidates = [
            CandidateMatch(profile=profiles_by_id[match.point_id], similarity=match.similarity)
            for match in matches
            if match.point_id in profiles_by_id
        ]
        dropped = len(matches) - len(candidates)
        if dropped:
            logger.info(f"Dropped {dropped} vector match(es) without a candidate profile")

        # Stable sort keeps the index's own order for equal scores
        candidates.sort(key=lambda c: c.similarity, reverse=True)

        logger.info(f"Candidate search found {len(candidates)} candidate(s) from {len(matches)} match(es)")
        return SearchOutcome(vector_hits=len(matches), candidates=candidates)
