"""Profile management API endpoints for HireChat."""

import logging
from fastapi import APIRouter, Depends

from hirechat.api.errors import http_error
from hirechat.dependencies import get_profile_service
from hirechat.exceptions import HireChatError
from hirechat.middleware.auth import get_current_user, require_recruiter
from hirechat.models.search import SearchRequest, SearchResponse
from hirechat.models.user import (
    Profile,
    ProfileResponse,
    ProfileUpdateRequest,
    RoleSelectionRequest,
    SocialLinksUpdateRequest,
)
from hirechat.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """
    Get the current user's profile.

    The resume URL, if any, is signed on every call and carries its own
    expiry time.
    """
    try:
        return profiles.get_own(current_user.id)
    except HireChatError as e:
        raise http_error(e)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    update_request: ProfileUpdateRequest,
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Update the current user's display name. Resume fields cannot be set here."""
    try:
        return profiles.update_name(current_user.id, update_request.name)
    except HireChatError as e:
        raise http_error(e)


@router.put("/social", response_model=ProfileResponse)
async def update_social_links(
    links_request: SocialLinksUpdateRequest,
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Update GitHub, LinkedIn and Twitter links. Each must be a valid URL."""
    try:
        return profiles.update_social_links(current_user.id, links_request)
    except HireChatError as e:
        raise http_error(e)


@router.post("/role", response_model=ProfileResponse)
async def select_role(
    role_request: RoleSelectionRequest,
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Confirm the account role. Role-gated endpoints stay closed until this is done."""
    try:
        return profiles.select_role(current_user.id, role_request.role)
    except HireChatError as e:
        raise http_error(e)


@router.post("/search", response_model=SearchResponse)
async def search_candidates(
    search_request: SearchRequest,
    current_user: Profile = Depends(require_recruiter),
    profiles: ProfileService = Depends(get_profile_service)
):
    """
    Semantic search over candidate resumes.

    Failures inside the search degrade to an empty result list.
    """
    logger.info(f"Recruiter {current_user.id} searching candidates (limit={search_request.limit})")
    return await profiles.search_candidates(search_request.query, search_request.limit or 10)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
):
    """View a profile: your own, or a candidate's if you are a recruiter."""
    try:
        return profiles.view(current_user, profile_id)
    except HireChatError as e:
        raise http_error(e)
