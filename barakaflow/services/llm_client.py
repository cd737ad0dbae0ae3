import logging

import openai
from openai import AsyncOpenAI

from barakaflow.config import settings
from barakaflow.services.assistant_errors import (
    AssistantNotConfigured,
    AssistantResponseError,
    AssistantUpstreamError,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Thin wrapper over an OpenAI-compatible chat completions endpoint.

    This is the only place the assistant touches the network. No retries:
    a failed call surfaces to the caller, which decides whether to offer one.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float = 0.7,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    @classmethod
    def from_settings(cls) -> "LLMClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            temperature=settings.OPENAI_TEMPERATURE,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def _get_client(self) -> AsyncOpenAI:
        if not self.configured:
            raise AssistantNotConfigured(
                "The assistant is not configured. Set OPENAI_API_KEY in your .env file."
            )
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url or None,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, messages: list[dict], max_tokens: int = 500) -> str:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=max_tokens,
            )
        except openai.AuthenticationError as exc:
            raise AssistantNotConfigured("Assistant authentication failed. Check OPENAI_API_KEY.") from exc
        except (openai.APIConnectionError, openai.APITimeoutError) as exc:
            logger.warning("LLM: cannot reach %s (%s)", self.base_url or "OpenAI", exc.__class__.__name__)
            raise AssistantUpstreamError("Cannot reach the assistant service. Try again later.") from exc
        except openai.APIError as exc:
            logger.warning("LLM: API error on model=%s: %s", self.model, exc)
            raise AssistantUpstreamError(f"Assistant API error: {exc.message}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AssistantResponseError("No response from the assistant")
        logger.debug("LLM: %d characters from model=%s", len(content), self.model)
        return content
