"""
OpenAI Client.

Chat completions for the script tools and image generation for design
assets, over the OpenAI REST API.

Usage:
    client = get_openai_client()
    text = await client.complete(system="You are a screenwriter.", prompt="...")
    url = await client.generate_image("A foggy harbour at dawn")
"""

from typing import Any

import httpx

from modules.backend.core.exceptions import ExternalServiceError
from modules.backend.integrations.base import ProviderClient


class OpenAIClient(ProviderClient):
    provider = "openai"

    def __init__(self, http: httpx.AsyncClient | None = None) -> None:
        from modules.backend.core.config import get_app_config, get_settings

        config = get_app_config().integrations.openai
        self._config = config
        super().__init__(
            base_url=config.base_url,
            headers={"Authorization": f"Bearer {get_settings().openai_api_key}"},
            timeout_seconds=config.timeout_seconds,
            semaphore="llm",
            breaker_config=config.circuit_breaker,
            retry_config=config.retry,
            http=http,
        )

    async def complete(self, system: str, prompt: str, max_tokens: int = 2000) -> str:
        """Run a single-turn chat completion and return the reply text."""
        payload: dict[str, Any] = {
            "model": self._config.chat_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
        }
        body = await self.request("POST", "/chat/completions", json=payload)
        try:
            return body["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("openai returned an unexpected completion") from e

    async def generate_image(self, prompt: str, size: str | None = None) -> str:
        """Generate one image and return its URL."""
        payload = {
            "model": self._config.image_model,
            "prompt": prompt,
            "n": 1,
            "size": size or self._config.image_size,
            "quality": self._config.image_quality,
        }
        body = await self.request("POST", "/images/generations", json=payload)
        try:
            return body["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("openai returned no image") from e


_client: OpenAIClient | None = None


def get_openai_client() -> OpenAIClient:
    """Get or create the shared OpenAI client."""
    global _client
    if _client is None:
        _client = OpenAIClient()
    return _client


async def close_openai_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
