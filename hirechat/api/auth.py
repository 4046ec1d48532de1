"""Authentication API endpoints for HireChat."""

from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hirechat.api.errors import http_error
from hirechat.config import settings
from hirechat.database import get_db
from hirechat.exceptions import HireChatError
from hirechat.middleware.auth import get_current_user
from hirechat.models.auth import LoginRequest, SignupRequest, TokenResponse
from hirechat.models.user import Profile, ProfileResponse
from hirechat.services.auth import auth_service


router = APIRouter(prefix="/auth", tags=["authentication"])


def _token_response(user_id: str, role, role_selected: bool) -> TokenResponse:
    access_token = auth_service.create_access_token(
        data={"sub": user_id, "role": role.value},
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes)
    )
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,  # Convert to seconds
        user_id=user_id,
        user_role=role,
        role_selected=role_selected,
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_request: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new account.

    The account starts with an unconfirmed role; the user picks one
    through `POST /profile/role` before using role-gated features.

    Raises:
        HTTPException: If the email already exists
    """
    try:
        profile = auth_service.register(
            db,
            name=signup_request.name,
            email=signup_request.email,
            password=signup_request.password,
            role=signup_request.role,
        )
    except HireChatError as e:
        raise http_error(e)

    return _token_response(profile.id, profile.role, profile.role_selected)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_request: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token.

    Raises:
        HTTPException: If credentials are invalid
    """
    user = auth_service.authenticate_user(db, login_request.email, login_request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is inactive"
        )

    return _token_response(user.id, user.role, user.role_selected)


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: Profile = Depends(get_current_user)):
    """Get the authenticated user's account details."""
    return ProfileResponse(**current_user.model_dump(exclude={"resume_path", "vector_point_id"}))
