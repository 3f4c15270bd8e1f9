"""
Unit tests for RequestContextMiddleware.
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.middleware import RequestContextMiddleware


@pytest.fixture
def middleware():
    return RequestContextMiddleware(MagicMock())


@pytest.fixture
def request_():
    request = MagicMock(spec=Request)
    request.headers = {}
    request.method = "POST"
    request.url = MagicMock()
    request.url.path = "/api/v1/billing/create-payment-intent"
    request.client = MagicMock()
    request.client.host = "10.0.0.8"
    request.state = MagicMock()
    return request


@pytest.fixture
def contextvars():
    with patch("modules.backend.core.middleware.structlog.contextvars") as mocked:
        yield mocked


async def ok(request):
    return Response(content="OK", status_code=200)


class TestClientLabel:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [("web", "web"), ("ADMIN", "admin"), ("smart-fridge", "unknown"), (None, "unknown")],
    )
    async def test_label(self, middleware, request_, contextvars, header, expected):
        if header:
            request_.headers = {"X-Client": header}

        await middleware.dispatch(request_, ok)

        assert request_.state.client == expected
        assert contextvars.bind_contextvars.call_args.kwargs["client"] == expected


class TestRequestId:
    async def test_generated_when_missing(self, middleware, request_, contextvars):
        response = await middleware.dispatch(request_, ok)

        assert len(response.headers["X-Request-ID"]) == 36
        assert request_.state.request_id == response.headers["X-Request-ID"]

    async def test_propagated_when_supplied(self, middleware, request_, contextvars):
        request_.headers = {"X-Request-ID": "checkout-42"}

        response = await middleware.dispatch(request_, ok)

        assert response.headers["X-Request-ID"] == "checkout-42"
        assert contextvars.bind_contextvars.call_args.kwargs == {
            "request_id": "checkout-42",
            "client": "unknown",
            "method": "POST",
            "path": "/api/v1/billing/create-payment-intent",
        }

    async def test_response_time_header(self, middleware, request_, contextvars):
        response = await middleware.dispatch(request_, ok)

        assert response.headers["X-Response-Time"].endswith("ms")


class TestContextLifecycle:
    async def test_cleared_before_and_after(self, middleware, request_, contextvars):
        await middleware.dispatch(request_, ok)

        assert contextvars.clear_contextvars.call_count == 2

    async def test_exception_clears_and_reraises(self, middleware, request_, contextvars):
        async def boom(request):
            raise RuntimeError("stripe unreachable")

        with pytest.raises(RuntimeError, match="stripe unreachable"):
            await middleware.dispatch(request_, boom)

        assert contextvars.clear_contextvars.call_count == 2

    async def test_missing_remote_client(self, middleware, request_, contextvars):
        request_.client = None

        async def boom(request):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await middleware.dispatch(request_, boom)
