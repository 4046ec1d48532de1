"""Chat models for HireChat."""

from typing import List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from enum import Enum


class MessageRole(str, Enum):
    """Chat message author."""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """Chat message model."""
    id: str
    chat_id: str
    role: MessageRole
    content: str
    created_at: datetime

    class Config:
        from_attributes = True  # For SQLAlchemy model conversion


class Chat(BaseModel):
    """Chat model with its ordered messages."""
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime
    messages: List[Message] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ChatListItem(BaseModel):
    """Chat summary for listings."""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ChatCreateRequest(BaseModel):
    """Request model for creating a chat."""
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class MessageCreateRequest(BaseModel):
    """Request model for sending a chat message."""
    content: str = Field(..., min_length=1, max_length=5000, description="Recruiter message text")

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v
