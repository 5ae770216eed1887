"""Tests for the HTTP client wrapper."""

import json

import httpx
import pytest

from storefront_client.api import ApiClient, ApiError
from storefront_client.notifications import BufferedNotifier

BASE_URL = "https://api.test"


async def test_default_headers(api, router):
    router.add("GET", "/health", json={"status": "ok"})

    await api.get("/health")

    headers = router.requests[0].headers
    assert headers["Cache-Control"] == "no-cache, no-store, must-revalidate"
    assert headers["Pragma"] == "no-cache"
    assert headers["Expires"] == "0"
    assert headers["Content-Type"] == "application/json"


def test_timeout_is_ten_seconds():
    client = ApiClient(BASE_URL)

    assert client.client.timeout.read == 10.0


async def test_returns_decoded_json(api, router):
    router.add("GET", "/products", json={"success": True, "data": [1, 2]})

    assert await api.get("/products") == {"success": True, "data": [1, 2]}


async def test_sends_json_body(api, router):
    router.add("PUT", "/orders/3/status", json={"ok": True})

    await api.put("/orders/3/status", json={"status": "shipped"})

    request = router.requests[0]
    assert request.method == "PUT"
    assert json.loads(request.content) == {"status": "shipped"}


async def test_empty_and_text_bodies(api, router):
    router.add("PATCH", "/empty", status_code=204)
    router.add("GET", "/text", text="pong")

    assert await api.patch("/empty") is None
    assert await api.get("/text") == "pong"


async def test_logs_request_and_response(api, router, caplog):
    router.add("GET", "/products", json=[])

    with caplog.at_level("INFO", logger="storefront_client.api"):
        await api.get("/products")

    assert "GET /products" in caplog.text
    assert "200 /products" in caplog.text


async def test_server_error_message_is_notified_and_raised(api, router, notifier):
    router.add("POST", "/orders", status_code=422, json={"error": "Invalid email"})

    with pytest.raises(ApiError) as exc_info:
        await api.post("/orders", json={})

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "Invalid email"
    assert exc_info.value.payload == {"error": "Invalid email"}
    assert notifier.drain() == [("error", "Invalid email")]


async def test_generic_message_without_server_error(api, router, notifier):
    router.add("GET", "/products", status_code=500, text="boom")

    with pytest.raises(ApiError, match="Internal server error"):
        await api.get("/products")

    assert notifier.drain() == [("error", "Internal server error")]


async def test_transport_error(notifier):
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with ApiClient(BASE_URL, notifier=notifier, transport=httpx.MockTransport(fail)) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.get("/products")

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert notifier.drain() == [("error", "Could not reach the server")]


async def test_failures_are_not_retried(api, router):
    router.add("GET", "/products", status_code=503, json={"message": "Unavailable"})

    with pytest.raises(ApiError, match="Unavailable"):
        await api.get("/products")

    assert len(router.requests) == 1


async def test_notifies_once_per_failure():
    notifier = BufferedNotifier()
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={}))

    async with ApiClient(BASE_URL, notifier=notifier, transport=transport) as api:
        for _ in range(2):
            with pytest.raises(ApiError):
                await api.get("/x")

    assert len(notifier.drain()) == 2
