"""
GrindProof Chat Service - Language Model Client

The interpreter consumes the model as "prompt in, text out". Replies are
untrusted text: callers extract what they need and fall back when they can't.
Provider failures are raised as LLMProviderError, already classified.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from grindproof_chat.config import settings
from grindproof_chat.errors import LLMProviderError, classify_provider_error

logger = logging.getLogger(__name__)


class TextCompletionClient(ABC):
    """Abstract text-completion collaborator (mockable for tests)."""

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        pass


class OpenAICompletionClient(TextCompletionClient):
    """Chat-completions backed implementation."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        from openai import AsyncOpenAI

        self.model = model or settings.MODEL_NAME
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=timeout or settings.LLM_TIMEOUT,
        )

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            kind = classify_provider_error(e)
            logger.warning(f"OpenAI completion failed ({kind.value}): {e}")
            raise LLMProviderError(kind, str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()


def build_llm_client() -> Optional[TextCompletionClient]:
    """Create the configured client, or None when the model is disabled."""
    if not settings.USE_LLM:
        logger.info("LLM disabled (USE_LLM=false), using deterministic fallbacks")
        return None
    if not settings.OPENAI_API_KEY:
        logger.warning("USE_LLM is set but OPENAI_API_KEY is missing, LLM features disabled")
        return None
    client = OpenAICompletionClient(api_key=settings.OPENAI_API_KEY)
    logger.info(f"OpenAI client initialized (model={client.model})")
    return client
