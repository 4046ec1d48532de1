"""Authentication service for HireChat."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import HireChatError
from ..models.database import ProfileDB
from ..models.user import Profile, UserRole
from .profile_store import ProfileStore

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(HireChatError):
    status_code = 409
    default_message = "An account with this email already exists"


class AuthenticationService:
    """Service for handling user authentication and JWT tokens."""

    def __init__(self):
        """Initialize authentication service with password context."""
        # Use pbkdf2_sha256 instead of bcrypt to avoid compatibility issues
        self.pwd_context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto"
        )

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a JWT access token.

        Args:
            data: The data to encode in the token
            expires_delta: Optional expiration time delta

        Returns:
            str: The encoded JWT token
        """
        to_encode = data.copy()
        now = datetime.utcnow()
        expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

        # Microsecond issued-at keeps tokens issued in the same second distinct
        to_encode.update({
            "exp": expire,
            "iat": now.timestamp(),
            "typ": "access",
        })
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    def verify_token(self, token: str) -> Optional[dict]:
        """
        Verify and decode an access token.

        Returns:
            dict: The decoded payload if valid, None otherwise
        """
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError:
            return None
        # File download tokens share the signing key but are not sessions
        if payload.get("typ") != "access":
            return None
        return payload

    def register(self, db: Session, name: str, email: str, password: str,
                 role: Optional[UserRole] = None) -> Profile:
        """
        Create a profile for a new account.

        The role defaults to candidate and stays unconfirmed until the user
        selects one explicitly, even when a role is given here.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
        """
        if db.query(ProfileDB).filter(ProfileDB.email == email).first():
            raise EmailAlreadyRegisteredError()

        profile = ProfileStore.admin(db).insert(
            name=name,
            email=email,
            password_hash=self.get_password_hash(password),
            role=role or UserRole.CANDIDATE,
            role_selected=False,
        )

        logger.info(f"Registered profile {profile.id}")
        return profile

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[ProfileDB]:
        """
        Authenticate a user with email and password.

        Returns:
            ProfileDB: The authenticated profile if valid, None otherwise
        """
        user = db.query(ProfileDB).filter(ProfileDB.email == email).first()
        if not user:
            return None
        if not self.verify_password(password, user.password_hash):
            return None
        return user

    def get_user_by_id(self, db: Session, user_id: str) -> Optional[ProfileDB]:
        return db.query(ProfileDB).filter(ProfileDB.id == user_id).first()


# Global authentication service instance
auth_service = AuthenticationService()
