import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from skyfish.api.http_client import AsyncHttpClient
from skyfish.config import Credentials, SkyfishConfig
from skyfish.models.auth import AuthToken
from skyfish.models.folder import Folder


class MockTransport(httpx.AsyncBaseTransport):
    """Queues canned responses and records the requests it receives."""

    def __init__(self) -> None:
        self._responses: list[dict[str, Any] | Exception] = []
        self.requests: list[httpx.Request] = []

    def add_response(
        self,
        status_code: int = httpx.codes.OK,
        json_data: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Add a response to the queue."""
        if content is None and json_data is not None:
            content = json.dumps(json_data).encode()
        self._responses.append(
            {"status_code": status_code, "content": content or b"", "headers": headers or {}}
        )

    def add_error(self, error: Exception) -> None:
        """Queue a transport-level failure."""
        self._responses.append(error)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(httpx.codes.INTERNAL_SERVER_ERROR, content=b"no mock response")

        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return httpx.Response(
            status_code=resp["status_code"],
            content=resp["content"],
            headers=resp["headers"],
        )


@pytest.fixture
def config() -> SkyfishConfig:
    return SkyfishConfig()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        username="editor@example.com",
        password="secret-password",
        api_key="api-key",
        hmac_secret="hmac-secret",
        cache_ttl_minutes=60,
        page_size=20,
    )


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def token() -> AuthToken:
    return AuthToken(token="tok-123", scheme="CBX-SIMPLE-TOKEN")


@pytest_asyncio.fixture
async def http(
    config: SkyfishConfig, mock_transport: MockTransport, token: AuthToken
) -> AsyncIterator[AsyncHttpClient]:
    """HTTP client on the mock transport, already holding a token."""
    async with AsyncHttpClient(config, transport=mock_transport) as client:
        client.set_token(token)
        yield client


@pytest.fixture
def make_folder() -> Callable[..., Folder]:
    def _make(folder_id: int, name: str, parent_id: int | None = None) -> Folder:
        return Folder(folder_id=folder_id, name=name, parent_id=parent_id)

    return _make
