"""Shortlisting orchestrator for recruiter chat messages."""

import logging
from enum import Enum

from ..exceptions import LLMError, LLMUnavailable, StoreError
from ..models.chat import Message, MessageRole
from .candidate_search import CandidateSearchService
from .chat_service import ChatService
from .llm_client import LLMClient
from .prompts import build_shortlist_prompt, candidate_entries

logger = logging.getLogger(__name__)

NO_CANDIDATES_MESSAGE = "No relevant candidates found for your query. Please try a different search."
PROFILES_NOT_FOUND_MESSAGE = "Found matching resumes but could not load the candidate profiles. Please try again."
LLM_UNCONFIGURED_MESSAGE = "The AI assistant is not available right now. Please contact your administrator."
LLM_ERROR_MESSAGE = "Sorry, there was an error processing your request. Please try again later."


class ShortlistState(str, Enum):
    RECEIVED = "received"
    SEARCHING = "searching"
    PROFILES_FETCHED = "profiles_fetched"
    PROMPTED = "prompted"
    ANSWERED = "answered"
    DEGRADED = "degraded"


class ShortlistOrchestrator:
    """
    Turns a recruiter chat message into a grounded candidate shortlist.

    Every handled message produces exactly one assistant reply, either the
    model's shortlist or a fixed degraded-mode explanation. The caller gets
    back the persisted user message and reads the reply from the chat.
    """

    def __init__(
        self,
        chats: ChatService,
        search: CandidateSearchService,
        llm: LLMClient,
        frontend_base_url: str,
        overfetch: int = 20,
        shortlist_size: int = 5,
    ):
        self.chats = chats
        self.search = search
        self.llm = llm
        self.frontend_base_url = frontend_base_url
        self.overfetch = overfetch
        self.shortlist_size = shortlist_size

    async def handle_message(self, chat_id: str, recruiter_id: str, text: str) -> Message:
        """
        Record a recruiter message and answer it with a shortlist.

        Args:
            chat_id: Chat the message belongs to
            recruiter_id: Profile ID of the chat's owner
            text: The recruiter's message, stored verbatim

        Returns:
            The persisted user message

        Raises:
            ChatNotFoundError: If the chat does not belong to the recruiter
            StoreError: If the user message could not be stored
        """
        self.chats.ensure_owner(chat_id, recruiter_id)

        user_message = self.chats.append_message(chat_id, MessageRole.USER, text)

        state, reply = await self._answer(chat_id, text)
        self._save_reply(chat_id, state, reply)
        return user_message

    async def _answer(self, chat_id: str, text: str):
        state = ShortlistState.SEARCHING
        outcome = await self.search.run(text, self.overfetch)
        if outcome.vector_hits == 0:
            logger.info(f"Chat {chat_id}: no vector matches, replying with {ShortlistState.DEGRADED.value} message")
            return ShortlistState.DEGRADED, NO_CANDIDATES_MESSAGE

        state = ShortlistState.PROFILES_FETCHED
        if not outcome.candidates:
            logger.warning(f"Chat {chat_id}: {outcome.vector_hits} match(es) but no candidate profiles resolved")
            return ShortlistState.DEGRADED, PROFILES_NOT_FOUND_MESSAGE

        entries = candidate_entries(outcome.candidates, self.frontend_base_url)
        prompt = build_shortlist_prompt(text, entries, self.shortlist_size)
        state = ShortlistState.PROMPTED

        try:
            answer = await self.llm.complete(prompt)
        except LLMUnavailable:
            logger.warning(f"Chat {chat_id}: LLM is not configured")
            return ShortlistState.DEGRADED, LLM_UNCONFIGURED_MESSAGE
        except LLMError as e:
            logger.error(f"Chat {chat_id}: shortlisting failed in state {state.value}: {e.message}")
            return ShortlistState.DEGRADED, LLM_ERROR_MESSAGE
        except Exception as e:
            logger.error(f"Chat {chat_id}: unexpected LLM failure in state {state.value}: {e.__class__.__name__}: {e}")
            return ShortlistState.DEGRADED, LLM_ERROR_MESSAGE

        logger.info(f"Chat {chat_id}: shortlisted from {len(entries)} candidate(s)")
        return ShortlistState.ANSWERED, answer

    def _save_reply(self, chat_id: str, state: ShortlistState, reply: str) -> None:
        try:
            self.chats.append_message(chat_id, MessageRole.ASSISTANT, reply)
            return
        except StoreError as e:
            if state is not ShortlistState.ANSWERED:
                raise
            logger.error(f"Chat {chat_id}: failed to store shortlist answer: {e.message}")

        # The recruiter still gets exactly one reply
        self.chats.append_message(chat_id, MessageRole.ASSISTANT, LLM_ERROR_MESSAGE)
