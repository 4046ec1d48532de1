"""Tests for profile-facing operations."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from hirechat.exceptions import AccessDeniedError, ProfileNotFoundError, ValidationError
from hirechat.models.search import VectorMatch
from hirechat.models.user import ProfileUpdateRequest, SocialLinksUpdateRequest, UserRole
from hirechat.services.candidate_search import CandidateSearchService
from hirechat.services.profile_service import ProfileService
from hirechat.services.profile_store import ProfileStore


@pytest.fixture
def profile_service(db_session, storage, embedder, vector_index):
    profiles = ProfileStore.admin(db_session)
    return ProfileService(
        profiles=profiles,
        storage=storage,
        search=CandidateSearchService(embedder, vector_index, profiles),
        signed_url_ttl=600,
    )


class TestOwnProfile:
    """Test cases for reading and editing your own profile."""

    def test_profile_without_resume_has_no_url(self, profile_service, profile_factory):
        """Test a profile without a resume has no resume URL."""
        alice = profile_factory("Alice")

        response = profile_service.get_own(alice.id)

        assert response.name == "Alice"
        assert response.resume_url is None
        assert response.resume_url_expires_at is None

    def test_resume_url_is_signed_on_every_read(self, profile_service, profile_factory, storage):
        """Test each read signs a fresh resume URL."""
        alice = profile_factory("Alice", resume_path="a/1_cv.pdf", vector_point_id="a")

        response = profile_service.get_own(alice.id)

        assert response.resume_url.startswith("http://testserver/files/a/1_cv.pdf?token=")
        assert response.resume_url_expires_at is not None
        token = response.resume_url.split("token=", 1)[1]
        assert storage.verify_token(token, "a/1_cv.pdf")

    def test_missing_profile(self, profile_service):
        """Test reading a missing profile raises."""
        with pytest.raises(ProfileNotFoundError):
            profile_service.get_own("missing")

    def test_update_name(self, profile_service, profile_factory):
        """Test updating the display name."""
        alice = profile_factory("Alice")

        assert profile_service.update_name(alice.id, "Alice Smith").name == "Alice Smith"

    def test_update_request_rejects_blank_name(self):
        """Test a blank name is rejected."""
        with pytest.raises(PydanticValidationError):
            ProfileUpdateRequest(name="   ")

    def test_update_request_ignores_resume_fields(self):
        """Test resume fields cannot be set through a profile update."""
        request = ProfileUpdateRequest(name="Alice", resume_path="evil.pdf")
        assert "resume_path" not in request.model_dump()


class TestSocialLinks:
    """Test cases for social link updates."""

    def test_only_provided_links_change(self, profile_service, profile_factory):
        """Test only the links in the request change."""
        alice = profile_factory("Alice", twitter="https://twitter.com/alice")

        response = profile_service.update_social_links(
            alice.id, SocialLinksUpdateRequest(github="https://github.com/alice")
        )

        assert response.github == "https://github.com/alice"
        assert response.twitter == "https://twitter.com/alice"
        assert response.linkedin is None

    def test_explicit_null_clears_a_link(self, profile_service, profile_factory):
        """Test sending null for a link removes it and leaves the others alone."""
        alice = profile_factory("Alice", github="https://github.com/alice", twitter="https://twitter.com/alice")

        response = profile_service.update_social_links(alice.id, SocialLinksUpdateRequest(twitter=None))

        assert response.twitter is None
        assert response.github == "https://github.com/alice"

    @pytest.mark.parametrize("bad_url", ["not a url", "github.com/alice", "ftp://"])
    def test_invalid_url_rejected(self, bad_url):
        """Test malformed links are rejected."""
        with pytest.raises(PydanticValidationError):
            SocialLinksUpdateRequest(github=bad_url)

    def test_overlong_url_rejected(self):
        """Test links over 255 characters are rejected."""
        with pytest.raises(PydanticValidationError):
            SocialLinksUpdateRequest(linkedin="https://linkedin.com/in/" + "a" * 250)


class TestRoleSelection:
    """Test cases for explicit role selection."""

    def test_select_role_marks_role_confirmed(self, profile_service, profile_factory):
        """Test selecting a role confirms it."""
        new_user = profile_factory("New", role_selected=False)

        response = profile_service.select_role(new_user.id, UserRole.RECRUITER)

        assert response.role == UserRole.RECRUITER
        assert response.role_selected is True

    def test_candidate_with_resume_cannot_become_recruiter(self, profile_service, profile_factory):
        """Test a candidate with a resume cannot switch to recruiter."""
        alice = profile_factory("Alice", resume_path="a/1_cv.pdf", vector_point_id="a")

        with pytest.raises(ValidationError):
            profile_service.select_role(alice.id, UserRole.RECRUITER)


class TestProfileView:
    """Test cases for viewing other users' profiles."""

    def test_recruiter_views_candidate(self, profile_service, profile_factory):
        """Test recruiters can view candidate profiles."""
        recruiter = profile_factory("Rita", role=UserRole.RECRUITER)
        alice = profile_factory("Alice")

        assert profile_service.view(recruiter, alice.id).name == "Alice"

    def test_candidate_cannot_view_others(self, profile_service, profile_factory):
        """Test candidates cannot view other profiles."""
        alice = profile_factory("Alice")
        bob = profile_factory("Bob")

        with pytest.raises(AccessDeniedError):
            profile_service.view(alice, bob.id)

    def test_recruiter_cannot_view_recruiters(self, profile_service, profile_factory):
        """Test recruiters cannot view other recruiters."""
        rita = profile_factory("Rita", role=UserRole.RECRUITER)
        rob = profile_factory("Rob", role=UserRole.RECRUITER)

        with pytest.raises(ProfileNotFoundError):
            profile_service.view(rita, rob.id)

    def test_unconfirmed_role_cannot_view_others(self, profile_service, profile_factory):
        """Test an unconfirmed account cannot view other profiles."""
        pending = profile_factory("Pending", role=UserRole.RECRUITER, role_selected=False)
        alice = profile_factory("Alice")

        with pytest.raises(AccessDeniedError):
            profile_service.view(pending, alice.id)

    def test_anyone_can_view_self(self, profile_service, profile_factory):
        """Test every user can view their own profile."""
        pending = profile_factory("Pending", role_selected=False)

        assert profile_service.view(pending, pending.id).id == pending.id


class TestProfileSearch:
    """Test cases for the recruiter search page."""

    @pytest.mark.asyncio
    async def test_search_returns_ranked_results(self, profile_service, profile_factory, vector_index):
        """Test profile search returns candidates ranked by similarity."""
        alice = profile_factory("Alice", github="https://github.com/alice")
        bob = profile_factory("Bob")
        vector_index.search_results = [
            VectorMatch(point_id=bob.id, similarity=0.71234),
            VectorMatch(point_id=alice.id, similarity=0.9),
        ]

        response = await profile_service.search_candidates("python", limit=10)

        assert response.total_results == 2
        assert [r.name for r in response.results] == ["Alice", "Bob"]
        assert response.results[0].github == "https://github.com/alice"
        assert response.results[1].similarity == 0.7123
        assert response.search_time_ms >= 0
