"""Recruiter chat API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from hirechat.api.errors import http_error
from hirechat.dependencies import get_chat_service, get_shortlist_orchestrator
from hirechat.exceptions import HireChatError
from hirechat.middleware.auth import require_recruiter
from hirechat.models.chat import Chat, ChatCreateRequest, ChatListItem, Message, MessageCreateRequest
from hirechat.models.user import Profile
from hirechat.services.chat_service import ChatService
from hirechat.services.shortlist_service import ShortlistOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["chats"])


@router.post("", response_model=Chat, status_code=status.HTTP_201_CREATED)
async def create_chat(
    chat_request: ChatCreateRequest,
    current_user: Profile = Depends(require_recruiter),
    chats: ChatService = Depends(get_chat_service)
):
    try:
        return chats.create_chat(current_user.id, chat_request.title)
    except HireChatError as e:
        raise http_error(e)


@router.get("", response_model=List[ChatListItem])
async def list_chats(
    current_user: Profile = Depends(require_recruiter),
    chats: ChatService = Depends(get_chat_service)
):
    """List the recruiter's chats, most recently active first."""
    try:
        return chats.list_chats(current_user.id)
    except HireChatError as e:
        raise http_error(e)


@router.get("/{chat_id}", response_model=Chat)
async def get_chat(
    chat_id: str,
    current_user: Profile = Depends(require_recruiter),
    chats: ChatService = Depends(get_chat_service)
):
    try:
        return chats.get_chat(chat_id, current_user.id)
    except HireChatError as e:
        raise http_error(e)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(
    chat_id: str,
    current_user: Profile = Depends(require_recruiter),
    chats: ChatService = Depends(get_chat_service)
):
    """Delete a chat together with all of its messages."""
    try:
        chats.delete_chat(chat_id, current_user.id)
    except HireChatError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{chat_id}/messages", response_model=List[Message])
async def list_messages(
    chat_id: str,
    current_user: Profile = Depends(require_recruiter),
    chats: ChatService = Depends(get_chat_service)
):
    """List a chat's messages in the order they were written."""
    try:
        return chats.get_messages(chat_id, current_user.id)
    except HireChatError as e:
        raise http_error(e)


@router.post("/{chat_id}/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    chat_id: str,
    message_request: MessageCreateRequest,
    current_user: Profile = Depends(require_recruiter),
    orchestrator: ShortlistOrchestrator = Depends(get_shortlist_orchestrator)
):
    """
    Send a message and get a candidate shortlist in reply.

    Returns the stored user message. The assistant's reply is appended to
    the chat and read through `GET /chats/{chat_id}/messages`.
    """
    try:
        return await orchestrator.handle_message(chat_id, current_user.id, message_request.content)
    except HireChatError as e:
        raise http_error(e)
