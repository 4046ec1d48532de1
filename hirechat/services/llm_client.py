"""Language model client for candidate shortlisting."""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ..config import Settings
from ..exceptions import LLMError, LLMUnavailable

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Single-shot chat completion client.

    Without an API key the client is constructed but unavailable; calls
    raise LLMUnavailable instead of failing at startup.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        max_retries: int = 3,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        if client is not None:
            self._client = client
        elif api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)
        else:
            self._client = None
            logger.warning("OPENAI_API_KEY is not set; shortlisting will run in degraded mode")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.openai_timeout,
            max_retries=settings.openai_max_retries,
        )

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str) -> str:
        """
        Run one chat completion with the prompt as the system message.

        Returns:
            The model's text output

        Raises:
            LLMUnavailable: If no credential is configured
            LLMError: If the request fails or returns no content
        """
        if self._client is None:
            raise LLMUnavailable()

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"LLM request to {self.model} failed: {e}")
            raise LLMError()

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            logger.error(f"LLM {self.model} returned an empty response")
            raise LLMError("Empty response from AI model")

        logger.info(f"LLM {self.model} returned {len(content)} characters")
        return content
