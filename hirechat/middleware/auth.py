"""Authentication dependencies for HireChat."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from hirechat.database import get_db
from hirechat.services.auth import auth_service
from hirechat.models.user import Profile, UserRole


# HTTP Bearer token scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """
    Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer credentials containing the JWT token
        db: Database session

    Returns:
        Profile: The authenticated user's profile

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = auth_service.verify_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = auth_service.get_user_by_id(db, user_id)
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive user"
        )

    return Profile.model_validate(user)


def _require_role(user: Profile, required: UserRole) -> Profile:
    if not user.role_selected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please select your account role first."
        )

    if user.role is UserRole.CANDIDATE:
        allowed = required is UserRole.CANDIDATE
    elif user.role is UserRole.RECRUITER:
        allowed = required is UserRole.RECRUITER
    else:
        raise AssertionError(f"Unhandled role: {user.role!r}")

    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. {required.value.capitalize()} role required."
        )
    return user


async def require_candidate(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Get the current user if they are a confirmed candidate."""
    return _require_role(current_user, UserRole.CANDIDATE)


async def require_recruiter(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Get the current user if they are a confirmed recruiter."""
    return _require_role(current_user, UserRole.RECRUITER)
