"""Tests for API client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from takify.api.client import APIClient
from takify.models.config_models import APIConfig
from takify.services.session import Session, SessionProvider


def _client(handler, *, retry: int = 2, provider: SessionProvider | None = None) -> APIClient:
    return APIClient(
        config=APIConfig(endpoint="https://api.test/api/", timeout=5, retry=retry),
        session_provider=provider,
        transport=httpx.MockTransport(handler),
    )


def test_client_initialization():
    client = APIClient(config=APIConfig(endpoint="https://api.test/api/"))

    assert client.base_url == "https://api.test/api"
    assert client.timeout == 30
    assert client._client is None


def test_client_defaults_to_configured_endpoint(tmp_config):
    with patch("takify.api.client.get_config_service", return_value=tmp_config):
        client = APIClient()

    assert client.base_url == "http://localhost:8000/api"


def test_get_headers_without_session():
    client = APIClient(config=APIConfig())
    headers = client._get_headers()

    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json"
    assert "Authorization" not in headers


def test_get_headers_with_session():
    provider = SessionProvider(Session(user_id="user-1", token="tok"))
    client = APIClient(config=APIConfig(), session_provider=provider)

    assert client._get_headers()["Authorization"] == "Bearer tok"
    assert "Authorization" not in client._get_headers(skip_auth=True)


@pytest.mark.asyncio
async def test_request_sends_path_params_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    provider = SessionProvider(Session(user_id="user-1", token="tok"))
    client = _client(handler, provider=provider)

    await client.get("v1/tasks", params={"userId": "user-1"})

    assert seen["url"] == "https://api.test/api/v1/tasks?userId=user-1"
    assert seen["auth"] == "Bearer tok"
    await client.close()


@pytest.mark.asyncio
async def test_token_change_is_picked_up():
    tokens = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    provider = SessionProvider(Session(user_id="user-1", token="old"))
    client = _client(handler, provider=provider)

    await client.get("/v1/tasks")
    provider.set_session(Session(user_id="user-1", token="new"))
    await client.get("/v1/tasks")
    provider.clear()
    await client.get("/v1/tasks")

    assert tokens == ["Bearer old", "Bearer new", None]
    await client.close()


@pytest.mark.asyncio
async def test_client_errors_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, json={"detail": "missing"})

    client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        await client.delete("/v1/tasks/t1")

    assert len(calls) == 1
    await client.close()


@pytest.mark.asyncio
async def test_server_errors_retried_with_backoff():
    responses = iter([httpx.Response(502), httpx.Response(503), httpx.Response(200, json={"id": "x"})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    client = _client(handler, retry=2)

    with patch("takify.api.client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        response = await client.post("/v1/tasks", json={"title": "x"})

    assert response.json() == {"id": "x"}
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1, 2]
    await client.close()


@pytest.mark.asyncio
async def test_retries_exhausted_raise_last_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler, retry=1)

    with patch("takify.api.client.asyncio.sleep", new_callable=AsyncMock):
        with pytest.raises(httpx.ConnectError):
            await client.get("/v1/tasks")
    await client.close()


@pytest.mark.asyncio
async def test_retry_zero_makes_single_attempt():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    client = _client(handler, retry=3)

    with pytest.raises(httpx.HTTPStatusError):
        await client.get("/v1/tasks", retry=0)

    assert len(calls) == 1
    await client.close()


@pytest.mark.asyncio
async def test_close_is_idempotent():
    client = _client(lambda request: httpx.Response(200, json={}))
    await client.get("/v1/tasks")

    await client.close()
    await client.close()

    assert client._client is None
