"""
Provider HTTP Client Base.

Shared resilience stack for outbound calls to third-party REST APIs:
    Circuit Breaker (aiobreaker) → Retry (tenacity) → Semaphore → Timeout → httpx

Transport errors, timeouts and 5xx responses are retried. 4xx responses
are not. Anything that still fails surfaces as ExternalServiceError.
"""

import asyncio
from typing import Any

import aiobreaker
import httpx

from modules.backend.core.concurrency import get_semaphore
from modules.backend.core.config_schema import CircuitBreakerSchema, RetrySchema
from modules.backend.core.exceptions import ExternalServiceError
from modules.backend.core.logging import get_logger
from modules.backend.core.resilience import create_circuit_breaker, retrying

logger = get_logger(__name__)


class ProviderServerError(Exception):
    """A 5xx from the provider. Retried, then counted by the breaker."""


class ProviderClient:
    """
    Base for provider clients.

    Subclasses pass their YAML block values and build request payloads;
    this class owns the httpx client and the resilience stack.
    """

    provider: str = "provider"

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        timeout_seconds: int,
        semaphore: str,
        breaker_config: CircuitBreakerSchema,
        retry_config: RetrySchema,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._semaphore = semaphore
        self._retry_config = retry_config
        self._breaker = create_circuit_breaker(self.provider, breaker_config)
        self._http = http or httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """
        Send a request through the full resilience stack.

        Raises:
            ExternalServiceError: On any provider failure or an open breaker
        """
        try:
            return await self._breaker.call_async(self._request_with_retry, method, path, **kwargs)
        except aiobreaker.CircuitBreakerError as e:
            logger.error(
                "Provider circuit open",
                extra={"provider": self.provider, "path": path},
            )
            raise ExternalServiceError(f"{self.provider} is temporarily unavailable") from e
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                f"{self.provider} rejected the request: {_error_message(e.response)}"
            ) from e
        except (httpx.HTTPError, ProviderServerError, TimeoutError) as e:
            logger.error(
                "Provider call failed",
                extra={"provider": self.provider, "path": path, "error": str(e)},
            )
            raise ExternalServiceError(f"{self.provider} request failed") from e

    async def _request_with_retry(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        async for attempt in retrying(
            self._retry_config,
            (httpx.TransportError, ProviderServerError, TimeoutError),
        ):
            with attempt:
                return await self._send(method, path, **kwargs)
        raise RuntimeError("unreachable")

    async def _send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        async with get_semaphore(self._semaphore):
            async with asyncio.timeout(self._timeout):
                response = await self._http.request(method, path, **kwargs)

        if response.status_code >= 500:
            raise ProviderServerError(f"{self.provider} returned {response.status_code}")
        response.raise_for_status()

        logger.debug(
            "Provider call succeeded",
            extra={"provider": self.provider, "path": path, "status": response.status_code},
        )
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"
