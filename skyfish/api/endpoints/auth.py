"""Authentication endpoint."""

from typing import Any

from skyfish.api.http_client import AsyncHttpClient

AUTHENTICATE_PATH = "/authenticate/userpasshmac"


async def authenticate(
    http: AsyncHttpClient,
    *,
    username: str,
    password: str,
    key: str,
    ts: int,
    hmac: str,
) -> dict[str, Any]:
    """
    Exchange credentials for a token.

    Args:
        http: Configured async HTTP client.
        username: Skyfish username.
        password: Skyfish password.
        key: API key.
        ts: Unix timestamp the signature was computed for.
        hmac: Request signature.

    Returns:
        Response body, expected to contain ``token``.
    """
    return await http.request(
        "POST",
        AUTHENTICATE_PATH,
        json={
            "username": username,
            "password": password,
            "key": key,
            "ts": ts,
            "hmac": hmac,
        },
        authenticated=False,
        auto_refresh=False,
    )
