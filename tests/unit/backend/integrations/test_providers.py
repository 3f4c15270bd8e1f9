"""
Unit Tests for Provider Clients.

The httpx client is swapped for a MockTransport, so requests never
leave the process.
"""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from modules.backend.core.config_schema import RetrySchema
from modules.backend.core.exceptions import ExternalServiceError
from modules.backend.integrations.openai_client import OpenAIClient
from modules.backend.integrations.stripe_client import StripeClient, encode_form

NO_WAIT = RetrySchema(max_attempts=2, backoff_multiplier=0, backoff_max=0)


class TestEncodeForm:
    """Tests for Stripe's bracketed form encoding."""

    def test_flat_values(self):
        assert encode_form({"amount": 999, "currency": "usd"}) == {
            "amount": "999",
            "currency": "usd",
        }

    def test_nested_dict(self):
        assert encode_form({"metadata": {"userId": "u1", "credits": 100}}) == {
            "metadata[userId]": "u1",
            "metadata[credits]": "100",
        }

    def test_list_of_dicts(self):
        assert encode_form({"items": [{"price": "price_1"}]}) == {"items[0][price]": "price_1"}

    def test_list_of_scalars(self):
        assert encode_form({"expand": ["latest_invoice.payment_intent"]}) == {
            "expand[0]": "latest_invoice.payment_intent",
        }

    def test_booleans_are_lowercase(self):
        assert encode_form({"automatic_payment_methods": {"enabled": True}}) == {
            "automatic_payment_methods[enabled]": "true",
        }

    def test_none_values_are_omitted(self):
        assert encode_form({"email": "a@b.com", "name": None}) == {"email": "a@b.com"}


class TestOpenAIClient:
    """Tests for chat completions and image generation."""

    @pytest.mark.asyncio
    async def test_complete_returns_reply_text(self, mock_transport):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"content": "FADE IN:"}}]},
            )

        client = OpenAIClient(http=mock_transport(handler))

        text = await client.complete(system="You are a screenwriter.", prompt="A story")

        assert text == "FADE IN:"
        assert seen["path"] == "/chat/completions"
        assert seen["body"]["messages"][0] == {
            "role": "system",
            "content": "You are a screenwriter.",
        }
        assert seen["body"]["messages"][1]["content"] == "A story"

    @pytest.mark.asyncio
    async def test_generate_image_returns_url(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": [{"url": "https://img.test/poster.png"}]})

        client = OpenAIClient(http=mock_transport(handler))

        assert await client.generate_image("A foggy harbour") == "https://img.test/poster.png"

    @pytest.mark.asyncio
    async def test_unexpected_body_raises(self, mock_transport):
        client = OpenAIClient(
            http=mock_transport(lambda request: httpx.Response(200, json={"choices": []})),
        )

        with pytest.raises(ExternalServiceError):
            await client.complete(system="s", prompt="p")

    @pytest.mark.asyncio
    async def test_server_error_is_retried_then_raised(self, mock_transport):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, json={})

        client = OpenAIClient(http=mock_transport(handler))
        client._retry_config = NO_WAIT

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.complete(system="s", prompt="p")

        assert len(calls) == 2
        assert exc_info.value.message == "openai request failed"

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, mock_transport):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(400, json={"error": {"message": "Prompt too long"}})

        client = OpenAIClient(http=mock_transport(handler))
        client._retry_config = NO_WAIT

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.complete(system="s", prompt="p")

        assert len(calls) == 1
        assert "Prompt too long" in exc_info.value.message


class TestStripeClient:
    """Tests for the Stripe REST client."""

    @pytest.mark.asyncio
    async def test_create_payment_intent_sends_form_body(self, mock_transport):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"id": "pi_1", "client_secret": "pi_1_secret"})

        client = StripeClient(http=mock_transport(handler))

        intent = await client.create_payment_intent(999, {"userId": "u1", "credits": 100})

        assert intent["client_secret"] == "pi_1_secret"
        assert seen["path"] == "/payment_intents"
        assert seen["form"]["amount"] == ["999"]
        assert seen["form"]["currency"] == ["usd"]
        assert seen["form"]["metadata[userId]"] == ["u1"]
        assert seen["form"]["automatic_payment_methods[enabled]"] == ["true"]

    @pytest.mark.asyncio
    async def test_retrieve_payment_intent(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/payment_intents/pi_1"
            return httpx.Response(200, json={"id": "pi_1", "status": "succeeded"})

        client = StripeClient(http=mock_transport(handler))

        assert (await client.retrieve_payment_intent("pi_1"))["status"] == "succeeded"

    @pytest.mark.asyncio
    async def test_card_error_message_is_surfaced(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={"error": {"message": "Your card was declined."}})

        client = StripeClient(http=mock_transport(handler))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.create_customer("a@b.com", None, {})

        assert exc_info.value.message == "stripe rejected the request: Your card was declined."
