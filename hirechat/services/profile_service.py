"""Profile-facing operations: own profile, social links, role selection and search."""

import logging
import time
from typing import Optional

from ..exceptions import AccessDeniedError, ProfileNotFoundError, ValidationError
from ..models.search import SearchResponse, SearchResult
from ..models.user import Profile, ProfileResponse, SocialLinksUpdateRequest, UserRole
from .candidate_search import CandidateSearchService
from .object_storage import LocalObjectStorage
from .profile_store import ProfileStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for reading and editing profiles on behalf of a signed-in user."""

    def __init__(
        self,
        profiles: ProfileStore,
        storage: LocalObjectStorage,
        search: Optional[CandidateSearchService] = None,
        signed_url_ttl: int = 3600,
    ):
        self.profiles = profiles
        self.storage = storage
        self.search = search
        self.signed_url_ttl = signed_url_ttl

    def to_response(self, profile: Profile) -> ProfileResponse:
        """Build the API view of a profile with a freshly signed resume URL."""
        resume_url = None
        expires_at = None
        if profile.resume_path:
            signed = self.storage.signed_url(profile.resume_path, self.signed_url_ttl)
            resume_url, expires_at = signed.url, signed.expires_at

        return ProfileResponse(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            role_selected=profile.role_selected,
            github=profile.github,
            linkedin=profile.linkedin,
            twitter=profile.twitter,
            resume_url=resume_url,
            resume_url_expires_at=expires_at,
            created_at=profile.created_at,
        )

    def _require(self, profile_id: str) -> Profile:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError()
        return profile

    def get_own(self, user_id: str) -> ProfileResponse:
        return self.to_response(self._require(user_id))

    def update_name(self, user_id: str, name: Optional[str]) -> ProfileResponse:
        if name is None:
            return self.get_own(user_id)
        profile = self.profiles.update_fields(user_id, name=name)
        logger.info(f"Updated name for profile {user_id}")
        return self.to_response(profile)

    def update_social_links(self, user_id: str, request: SocialLinksUpdateRequest) -> ProfileResponse:
        """Update only the links present in the request."""
        links = request.as_strings()
        if not links:
            return self.get_own(user_id)
        profile = self.profiles.update_fields(user_id, **links)
        logger.info(f"Updated social links {sorted(links)} for profile {user_id}")
        return self.to_response(profile)

    def select_role(self, user_id: str, role: UserRole) -> ProfileResponse:
        """
        Confirm the account's role.

        Raises:
            ValidationError: If a candidate with an indexed resume tries to become a recruiter
        """
        current = self._require(user_id)
        if role is UserRole.RECRUITER and current.has_resume:
            raise ValidationError("Delete your resume before switching to a recruiter account")

        profile = self.profiles.update_fields(user_id, role=role, role_selected=True)
        logger.info(f"Profile {user_id} selected role {role.value}")
        return self.to_response(profile)

    def view(self, viewer: Profile, profile_id: str) -> ProfileResponse:
        """
        Show a profile to another user.

        Anyone may view their own profile. Recruiters may view candidate
        profiles; candidates may not view anyone else.
        """
        if viewer.id == profile_id:
            return self.get_own(profile_id)
        if not viewer.role_selected:
            raise AccessDeniedError("Please select your account role first.")

        if viewer.role is UserRole.CANDIDATE:
            raise AccessDeniedError("Candidates can only view their own profile")
        elif viewer.role is UserRole.RECRUITER:
            profile = self.profiles.get(profile_id)
            if profile is None or profile.role is not UserRole.CANDIDATE:
                raise ProfileNotFoundError()
            return self.to_response(profile)
        raise AssertionError(f"Unhandled role: {viewer.role!r}")

    async def search_candidates(self, query: str, limit: int = 10) -> SearchResponse:
        """Semantic candidate search for the recruiter search page."""
        if self.search is None:
            raise RuntimeError("ProfileService was created without a search service")

        start_time = time.time()
        matches = await self.search.search(query, limit)
        results = [
            SearchResult(
                candidate_id=match.profile.id,
                name=match.profile.name,
                email=match.profile.email,
                github=match.profile.github,
                linkedin=match.profile.linkedin,
                twitter=match.profile.twitter,
                similarity=round(match.similarity, 4),
            )
            for match in matches
        ]
        search_time_ms = (time.time() - start_time) * 1000
        logger.info(f"Profile search returned {len(results)} result(s) in {search_time_ms:.1f}ms")
        return SearchResponse(results=results, total_results=len(results), search_time_ms=search_time_ms)
