"""Models package initialization."""

from .user import (
    UserRole,
    Profile,
    ProfileResponse,
    ProfileUpdateRequest,
    SocialLinksUpdateRequest,
    RoleSelectionRequest,
)
from .chat import (
    MessageRole,
    Message,
    Chat,
    ChatListItem,
    ChatCreateRequest,
    MessageCreateRequest,
)
from .database import Base, ProfileDB, ChatDB, MessageDB

__all__ = [
    # Enums
    "UserRole",
    "MessageRole",
    # Pydantic models
    "Profile",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "SocialLinksUpdateRequest",
    "RoleSelectionRequest",
    "Message",
    "Chat",
    "ChatListItem",
    "ChatCreateRequest",
    "MessageCreateRequest",
    # SQLAlchemy models
    "Base",
    "ProfileDB",
    "ChatDB",
    "MessageDB",
]
