"""
LLM client for an OpenAI-compatible chat completion API.

Provides async interface for single-turn text generation. Every failure is
raised as CompletionAPIError.
"""

import logging

import httpx

from config.models import LLM_MODEL
from config.settings import Settings, settings as default_settings
from services.errors import CompletionAPIError, InitializationError
from utils.api import get_llm_headers

logger = logging.getLogger(__name__)


class LLMClient:
    """Async client for the chat completion API."""

    def __init__(
        self,
        config: Settings | None = None,
        model: str = LLM_MODEL,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Initialize LLM client.

        Args:
            config: Settings with API key and endpoint URL.
            model: Model identifier.
            transport: Optional httpx transport (tests).

        Raises:
            InitializationError: If no API key is configured.
        """
        self.config = config or default_settings
        if not self.config.llm_api_key:
            raise InitializationError("Missing LLM_API_KEY")
        self.model = model
        self.transport = transport

    async def generate(self, system: str, user: str) -> str:
        """
        Generate text completion.

        Args:
            system: System prompt defining behavior.
            user: User message to respond to.

        Returns:
            Generated text response.
        """
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user}
        ]

        try:
            async with httpx.AsyncClient(timeout=60.0, transport=self.transport) as client:
                response = await client.post(
                    self.config.llm_url,
                    headers=get_llm_headers(self.config),
                    json={
                        "model": self.model,
                        "messages": messages,
                        "n": 1
                    }
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionAPIError(f"completion returned HTTP {e.response.status_code}", e) from e
        except (httpx.HTTPError, ValueError) as e:
            raise CompletionAPIError("completion request failed", e) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionAPIError("completion returned a malformed body", e) from e

        if not isinstance(content, str):
            raise CompletionAPIError("completion returned a malformed body: content is not text")

        if not content.strip():
            raise CompletionAPIError("completion returned empty text")

        content = content.strip()
        logger.info(f"Generated response: {content[:100]}...")
        return content
