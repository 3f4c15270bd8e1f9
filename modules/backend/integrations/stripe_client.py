"""
Stripe Client.

Payment intents, customers and subscriptions over the Stripe REST API.
Stripe takes form-encoded bodies with bracketed keys for nested values,
e.g. metadata[userId]=... and items[0][price]=....
"""

from typing import Any

import httpx

from modules.backend.integrations.base import ProviderClient


def encode_form(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested dicts/lists into Stripe's bracketed form keys."""
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            flat.update(encode_form(value, name))
        elif isinstance(value, list):
            for index, item in enumerate(value):
                item_name = f"{name}[{index}]"
                if isinstance(item, dict):
                    flat.update(encode_form(item, item_name))
                else:
                    flat[item_name] = str(item)
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        else:
            flat[name] = str(value)
    return flat


class StripeClient(ProviderClient):
    provider = "stripe"

    def __init__(self, http: httpx.AsyncClient | None = None) -> None:
        from modules.backend.core.config import get_app_config, get_settings

        config = get_app_config().integrations.stripe
        self.currency = config.currency
        super().__init__(
            base_url=config.base_url,
            headers={"Authorization": f"Bearer {get_settings().stripe_secret_key}"},
            timeout_seconds=config.timeout_seconds,
            semaphore="external_api",
            breaker_config=config.circuit_breaker,
            retry_config=config.retry,
            http=http,
        )

    async def _post(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", path, data=encode_form(data))

    async def create_payment_intent(self, amount: int, metadata: dict[str, Any]) -> dict[str, Any]:
        return await self._post(
            "/payment_intents",
            {
                "amount": amount,
                "currency": self.currency,
                "metadata": metadata,
                "automatic_payment_methods": {"enabled": True},
            },
        )

    async def retrieve_payment_intent(self, payment_intent_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/payment_intents/{payment_intent_id}")

    async def create_customer(
        self, email: str, name: str | None, metadata: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._post(
            "/customers",
            {"email": email, "name": name, "metadata": metadata},
        )

    async def create_subscription(
        self, customer_id: str, price_id: str, metadata: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._post(
            "/subscriptions",
            {
                "customer": customer_id,
                "items": [{"price": price_id}],
                "payment_behavior": "default_incomplete",
                "expand": ["latest_invoice.payment_intent"],
                "metadata": metadata,
            },
        )


_client: StripeClient | None = None


def get_stripe_client() -> StripeClient:
    """Get or create the shared Stripe client."""
    global _client
    if _client is None:
        _client = StripeClient()
    return _client


async def close_stripe_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
