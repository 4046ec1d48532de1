"""Authentication models for HireChat."""

from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
import re

from .user import UserRole


class LoginRequest(BaseModel):
    """Login request model."""
    email: str
    password: str


class SignupRequest(BaseModel):
    """Signup request model. Role is optional and stays unconfirmed until selected."""
    name: str
    email: EmailStr
    password: str
    role: Optional[UserRole] = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        if not re.search(r'[A-Z]', v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not re.search(r'[a-z]', v):
            raise ValueError('Password must contain at least one lowercase letter')
        if not re.search(r'\d', v):
            raise ValueError('Password must contain at least one digit')
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not empty and has reasonable length."""
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be empty')
        if len(v) > 100:
            raise ValueError('Name cannot exceed 100 characters')
        return v


class TokenResponse(BaseModel):
    """Token response model."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str
    user_role: UserRole
    role_selected: bool
