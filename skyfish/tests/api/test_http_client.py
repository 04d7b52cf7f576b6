"""Tests for AsyncHttpClient."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from structlog.testing import capture_logs

from skyfish.api.http_client import (
    STATUS_MESSAGES,
    AsyncHttpClient,
    sanitize_for_log,
    status_error,
)
from skyfish.config import SkyfishConfig
from skyfish.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)
from skyfish.models.auth import AuthToken


def test_is_authenticated_returns_false_initially(config: SkyfishConfig) -> None:
    client = AsyncHttpClient(config)
    assert client.is_authenticated is False


def test_set_token_and_clear_token(config: SkyfishConfig, token: AuthToken) -> None:
    client = AsyncHttpClient(config)
    client.set_token(token)
    assert client.is_authenticated is True
    assert client.token is token

    client.clear_token()
    assert client.is_authenticated is False
    assert client.token is None


# Request headers tests


@pytest.mark.asyncio
async def test_request_sends_authorization_header(mock_transport, http) -> None:
    mock_transport.add_response(json_data=[])

    await http.request("GET", "/folder?sort_by=name")

    request = mock_transport.requests[0]
    assert request.headers["authorization"] == "CBX-SIMPLE-TOKEN Token=tok-123"
    assert request.url == "https://api.colourbox.com/folder?sort_by=name"


@pytest.mark.asyncio
async def test_unauthenticated_request_has_no_authorization_header(
    config: SkyfishConfig, mock_transport
) -> None:
    mock_transport.add_response(json_data={"token": "t"})

    async with AsyncHttpClient(config, transport=mock_transport) as client:
        await client.request("POST", "/authenticate/userpasshmac", json={}, authenticated=False)

    assert "authorization" not in mock_transport.requests[0].headers


@pytest.mark.asyncio
async def test_request_without_token_fails_before_sending(
    config: SkyfishConfig, mock_transport
) -> None:
    async with AsyncHttpClient(config, transport=mock_transport) as client:
        with pytest.raises(AuthenticationError):
            await client.request("GET", "/folder?sort_by=name")

    assert mock_transport.requests == []


# Request/response handling tests


@pytest.mark.asyncio
async def test_request_returns_decoded_json(mock_transport, http) -> None:
    mock_transport.add_response(json_data={"filename": "harbour.jpg"})

    assert await http.request("GET", "/media/1") == {"filename": "harbour.jpg"}


@pytest.mark.asyncio
async def test_request_sends_json_body(mock_transport, http) -> None:
    mock_transport.add_response(json_data={})

    await http.request("POST", "/test", json={"key": "value"}, authenticated=False)

    assert json.loads(mock_transport.requests[0].content) == {"key": "value"}


@pytest.mark.asyncio
async def test_request_log_masks_credentials(mock_transport, http) -> None:
    mock_transport.add_response(json_data={"token": "t"})

    with capture_logs() as logs:
        await http.request(
            "POST",
            "/authenticate/userpasshmac",
            json={"username": "u", "password": "pw", "hmac": "sig"},
            authenticated=False,
        )

    assert logs[0]["event"] == "API request"
    assert logs[0]["body"] == {"username": "u", "password": "***", "hmac": "***"}


@pytest.mark.asyncio
async def test_request_keeps_plus_joined_query(mock_transport, http) -> None:
    mock_transport.add_response(json_data={})

    await http.request("GET", "/search?media_type=image+video&order=created")

    assert mock_transport.requests[0].url.query == b"media_type=image+video&order=created"


# Error handling tests


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (400, BadRequestError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, ServerError),
    ],
)
async def test_request_classifies_status(
    config: SkyfishConfig, mock_transport, token: AuthToken, status: int, error_type: type
) -> None:
    mock_transport.add_response(status_code=status, json_data={})

    async with AsyncHttpClient(config, transport=mock_transport) as client:
        client.set_token(token)
        with capture_logs() as logs, pytest.raises(error_type) as exc_info:
            await client.request("GET", "/media/1")

    assert exc_info.value.code == status
    errors = [log for log in logs if log["log_level"] == "error"]
    assert errors[0]["event"] == STATUS_MESSAGES[status]


@pytest.mark.asyncio
async def test_not_found_logs_category_message(mock_transport, http) -> None:
    mock_transport.add_response(status_code=404, json_data={})

    with capture_logs() as logs, pytest.raises(NotFoundError):
        await http.request("GET", "/media/999")

    errors = [log for log in logs if log["log_level"] == "error"]
    assert errors[0]["event"].startswith("The requested resource does not exist.")
    assert errors[0]["endpoint"] == "/media/999"


@pytest.mark.asyncio
async def test_server_error_carries_request_id(mock_transport, http) -> None:
    mock_transport.add_response(
        status_code=500, json_data={}, headers={"X-Cbx-Request-Id": "req-42"}
    )

    with pytest.raises(ServerError) as exc_info:
        await http.request("GET", "/media/1")

    assert exc_info.value.request_id == "req-42"
    assert "req-42" in str(exc_info.value)


@pytest.mark.asyncio
async def test_unknown_status_raises_api_error(mock_transport, http) -> None:
    mock_transport.add_response(status_code=418, json_data={})

    with capture_logs() as logs, pytest.raises(APIError) as exc_info:
        await http.request("GET", "/media/1")

    assert exc_info.value.code == 418
    errors = [log for log in logs if log["log_level"] == "error"]
    assert errors[0]["event"] == "Unknown status code: 418"


@pytest.mark.asyncio
async def test_request_raises_decode_error_on_invalid_json(mock_transport, http) -> None:
    mock_transport.add_response(content=b"not json")

    with pytest.raises(DecodeError, match="Invalid JSON"):
        await http.request("GET", "/media/1")


@pytest.mark.asyncio
async def test_request_raises_network_error_on_transport_failure(mock_transport, http) -> None:
    mock_transport.add_error(httpx.ConnectError("connection refused"))

    with pytest.raises(NetworkError):
        await http.request("GET", "/media/1")


# Token refresh tests


@pytest.mark.asyncio
async def test_request_reauthenticates_once_on_401(mock_transport, http, token) -> None:
    fresh = AuthToken(token="fresh", scheme=token.scheme)
    reauthenticate = AsyncMock(return_value=fresh)
    http.set_token(token, reauthenticate=reauthenticate)
    mock_transport.add_response(status_code=401, json_data={})
    mock_transport.add_response(json_data={"id": 1})

    result = await http.request("GET", "/media/1")

    assert result == {"id": 1}
    reauthenticate.assert_awaited_once()
    assert http.token is fresh
    assert mock_transport.requests[1].headers["authorization"] == "CBX-SIMPLE-TOKEN Token=fresh"


@pytest.mark.asyncio
async def test_request_fails_when_retry_is_also_rejected(mock_transport, http, token) -> None:
    reauthenticate = AsyncMock(return_value=AuthToken(token="fresh", scheme=token.scheme))
    http.set_token(token, reauthenticate=reauthenticate)
    mock_transport.add_response(status_code=401, json_data={})
    mock_transport.add_response(status_code=401, json_data={})

    with pytest.raises(UnauthorizedError):
        await http.request("GET", "/media/1")

    reauthenticate.assert_awaited_once()
    assert len(mock_transport.requests) == 2


@pytest.mark.asyncio
async def test_failed_reauthentication_clears_token(mock_transport, http, token) -> None:
    http.set_token(token, reauthenticate=AsyncMock(side_effect=AuthenticationError("nope")))
    mock_transport.add_response(status_code=401, json_data={})

    with pytest.raises(AuthenticationError):
        await http.request("GET", "/media/1")

    assert http.is_authenticated is False


@pytest.mark.asyncio
async def test_request_does_not_reauthenticate_when_disabled(
    mock_transport, token: AuthToken
) -> None:
    config = SkyfishConfig(refresh_on_unauthorized=False)
    reauthenticate = AsyncMock()
    mock_transport.add_response(status_code=401, json_data={})

    async with AsyncHttpClient(config, transport=mock_transport) as client:
        client.set_token(token, reauthenticate=reauthenticate)
        with pytest.raises(UnauthorizedError):
            await client.request("GET", "/media/1")

    reauthenticate.assert_not_awaited()
    assert len(mock_transport.requests) == 1


# Raw request tests


@pytest.mark.asyncio
async def test_request_raw_returns_bytes_without_auth(mock_transport, http) -> None:
    mock_transport.add_response(content=b"raw content")

    result = await http.request_raw("https://download.example.com/file.jpg")

    assert result == b"raw content"
    assert "authorization" not in mock_transport.requests[0].headers


@pytest.mark.asyncio
async def test_request_raw_raises_network_error_on_bad_status(mock_transport, http) -> None:
    mock_transport.add_response(status_code=410, content=b"gone")

    with pytest.raises(NetworkError) as exc_info:
        await http.request_raw("https://download.example.com/file.jpg")

    assert exc_info.value.context["status_code"] == 410


# Helpers


def test_sanitize_for_log_masks_secrets() -> None:
    data = {
        "username": "editor",
        "password": "pw",
        "key": "k",
        "hmac": "h",
        "nested": {"token": "t", "id": 1},
        "items": [{"Authorization": "CBX"}, 3],
    }

    assert sanitize_for_log(data) == {
        "username": "editor",
        "password": "***",
        "key": "***",
        "hmac": "***",
        "nested": {"token": "***", "id": 1},
        "items": [{"Authorization": "***"}, 3],
    }


def test_status_error_treats_other_5xx_as_server_error() -> None:
    error = status_error(503, "/search")

    assert isinstance(error, ServerError)
    assert error.code == 503


# Context manager tests


@pytest.mark.asyncio
async def test_client_closes_on_exit(config: SkyfishConfig, mock_transport) -> None:
    async with AsyncHttpClient(config, transport=mock_transport) as client:
        assert client._client is not None

    assert client._client is None


@pytest.mark.asyncio
async def test_close_is_idempotent(config: SkyfishConfig, mock_transport) -> None:
    client = AsyncHttpClient(config, transport=mock_transport)
    client._ensure_client()
    await client.close()
    await client.close()

    assert client._client is None
