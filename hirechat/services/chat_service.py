"""Chat and message persistence for recruiter conversations."""

import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import ChatNotFoundError, StoreError
from ..models.chat import Chat, ChatListItem, Message, MessageRole
from ..models.database import ChatDB, MessageDB

logger = logging.getLogger(__name__)


class ChatService:
    """Service for chats owned by a recruiter and their append-only messages."""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned_chat(self, chat_id: str, user_id: str) -> ChatDB:
        try:
            chat = (
                self.db.query(ChatDB)
                .filter(ChatDB.id == chat_id, ChatDB.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Chat lookup failed for {chat_id}: {e}")
            raise StoreError()
        if chat is None:
            raise ChatNotFoundError()
        return chat

    def create_chat(self, user_id: str, title: str) -> Chat:
        """
        Create a new chat for a recruiter.

        Args:
            user_id: Owning recruiter's profile ID
            title: Chat title

        Returns:
            The created chat
        """
        now = datetime.utcnow()
        chat = ChatDB(user_id=user_id, title=title, created_at=now, updated_at=now)
        try:
            self.db.add(chat)
            self.db.commit()
            self.db.refresh(chat)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create chat for user {user_id}: {e}")
            raise StoreError("Failed to create chat")

        logger.info(f"Created chat {chat.id} for user {user_id}")
        return Chat(
            id=chat.id,
            user_id=chat.user_id,
            title=chat.title,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
        )

    def list_chats(self, user_id: str) -> List[ChatListItem]:
        """List a user's chats, most recently active first."""
        try:
            chats = (
                self.db.query(ChatDB)
                .filter(ChatDB.user_id == user_id)
                .order_by(ChatDB.updated_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list chats for user {user_id}: {e}")
            raise StoreError("Failed to retrieve chats")
        return [ChatListItem.model_validate(chat) for chat in chats]

    def get_chat(self, chat_id: str, user_id: str) -> Chat:
        """Get a chat with its messages in creation order."""
        chat = self._get_owned_chat(chat_id, user_id)
        return Chat(
            id=chat.id,
            user_id=chat.user_id,
            title=chat.title,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
            messages=self.get_messages(chat_id, user_id),
        )

    def get_messages(self, chat_id: str, user_id: str) -> List[Message]:
        """Get a chat's messages ordered by creation time."""
        self._get_owned_chat(chat_id, user_id)
        try:
            messages = (
                self.db.query(MessageDB)
                .filter(MessageDB.chat_id == chat_id)
                .order_by(MessageDB.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load messages for chat {chat_id}: {e}")
            raise StoreError("Failed to retrieve messages")
        return [Message.model_validate(message) for message in messages]

    def ensure_owner(self, chat_id: str, user_id: str) -> None:
        """Raise ChatNotFoundError unless the chat exists and belongs to the user."""
        self._get_owned_chat(chat_id, user_id)

    def append_message(self, chat_id: str, role: MessageRole, content: str) -> Message:
        """
        Append a message to a chat.

        Creation times are strictly increasing within a chat, so ordering by
        `created_at` always reproduces insertion order.

        Raises:
            StoreError: If the message could not be persisted
        """
        try:
            last_created = (
                self.db.query(func.max(MessageDB.created_at))
                .filter(MessageDB.chat_id == chat_id)
                .scalar()
            )
            created_at = datetime.utcnow()
            if last_created is not None and created_at <= last_created:
                created_at = last_created + timedelta(microseconds=1)

            message = MessageDB(chat_id=chat_id, role=role, content=content, created_at=created_at)
            self.db.add(message)
            self.db.query(ChatDB).filter(ChatDB.id == chat_id).update({ChatDB.updated_at: created_at})
            self.db.commit()
            self.db.refresh(message)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save {role.value} message in chat {chat_id}: {e}")
            raise StoreError("Failed to save message")

        return Message.model_validate(message)

    def delete_chat(self, chat_id: str, user_id: str) -> None:
        """Delete a chat and, through the cascade, all of its messages."""
        chat = self._get_owned_chat(chat_id, user_id)
        try:
            self.db.delete(chat)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete chat {chat_id}: {e}")
            raise StoreError("Failed to delete chat")
        logger.info(f"Deleted chat {chat_id}")
