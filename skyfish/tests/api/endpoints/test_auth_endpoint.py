from unittest.mock import AsyncMock, Mock

import pytest

from skyfish.api.endpoints.auth import authenticate


@pytest.fixture
def mock_http() -> Mock:
    return Mock()


@pytest.mark.asyncio
async def test_authenticate_posts_credentials_unauthenticated(mock_http: Mock) -> None:
    mock_http.request = AsyncMock(return_value={"token": "tok"})

    result = await authenticate(
        mock_http,
        username="editor@example.com",
        password="pw",
        key="api-key",
        ts=1700000000,
        hmac="signature",
    )

    mock_http.request.assert_called_once_with(
        "POST",
        "/authenticate/userpasshmac",
        json={
            "username": "editor@example.com",
            "password": "pw",
            "key": "api-key",
            "ts": 1700000000,
            "hmac": "signature",
        },
        authenticated=False,
        auto_refresh=False,
    )
    assert result == {"token": "tok"}
