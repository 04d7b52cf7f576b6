"""
Async HTTP client for the Skyfish API.

Single chokepoint for outbound calls: injects the Authorization header,
classifies non-200 statuses, decodes JSON, and re-authenticates once on 401.
"""

from collections.abc import Awaitable, Callable
from http import HTTPStatus
from typing import Any

import httpx
import structlog

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

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Cbx-Request-Id"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "key",
        "hmac",
        "token",
        "Authorization",
    }
)

STATUS_MESSAGES: dict[int, str] = {
    HTTPStatus.BAD_REQUEST: "Your request contains bad syntax and the API could not understand it.",
    HTTPStatus.UNAUTHORIZED: "You need to be logged in to access the resource",
    HTTPStatus.FORBIDDEN: "You do not have access to this resource. It will help to authenticate.",
    HTTPStatus.NOT_FOUND: (
        "The requested resource does not exist. "
        "This is also returned if the method is not allowed on the resource."
    ),
    HTTPStatus.CONFLICT: (
        "We encountered a conflict when trying to process your update. "
        "Try applying your update again."
    ),
    HTTPStatus.INTERNAL_SERVER_ERROR: (
        "We encountered a problem parsing your request and can not say what went wrong. "
        f"Please provide us with the “{REQUEST_ID_HEADER}” from the response "
        "as it will help us debug the problem."
    ),
}

Reauthenticator = Callable[[], Awaitable[AuthToken]]


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive fields from a dict before logging.

    Recursively sanitizes nested dictionaries and lists.

    Args:
        data: Dictionary that may contain sensitive values.

    Returns:
        Copy with sensitive values replaced by "***".
    """
    result = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS:
            result[key] = "***"
        elif isinstance(value, dict):
            result[key] = sanitize_for_log(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_for_log(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def status_error(
    status_code: int, endpoint: str, *, request_id: str | None = None
) -> APIError:
    """
    Build the exception for a non-200 status and log its category.

    Args:
        status_code: HTTP status of the response.
        endpoint: Endpoint that was called.
        request_id: Value of the request-id response header, if any.

    Returns:
        The classified exception (not raised).
    """
    message = STATUS_MESSAGES.get(status_code)
    if message is None:
        message = f"Unknown status code: {status_code}"

    logger.error(message, status_code=status_code, endpoint=endpoint, request_id=request_id)

    match status_code:
        case HTTPStatus.BAD_REQUEST:
            return BadRequestError(message, endpoint=endpoint)
        case HTTPStatus.UNAUTHORIZED:
            return UnauthorizedError(message, endpoint=endpoint)
        case HTTPStatus.FORBIDDEN:
            return ForbiddenError(message, endpoint=endpoint)
        case HTTPStatus.NOT_FOUND:
            return NotFoundError(message, endpoint=endpoint)
        case HTTPStatus.CONFLICT:
            return ConflictError(message, endpoint=endpoint)
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return ServerError(message, code=status_code, endpoint=endpoint, request_id=request_id)
    return APIError(message, code=status_code, endpoint=endpoint)


class AsyncHttpClient:
    """Async HTTP client for the Skyfish API."""

    def __init__(
        self,
        config: SkyfishConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._transport = transport

        self._token: AuthToken | None = None
        self._reauthenticate: Reauthenticator | None = None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncHttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.api_url,
                timeout=self._config.timeout,
                transport=self._transport,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self._config.user_agent,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying connection pool. Safe to call twice."""
        if self._client is None:
            logger.debug("Client not open.")
            return
        await self._client.aclose()
        self._client = None

    def set_token(self, token: AuthToken, *, reauthenticate: Reauthenticator | None = None) -> None:
        """
        Set the token sent with authenticated requests.

        Note:
            Internal use only. Called by AuthService after a successful login.

        Args:
            token: Token to present.
            reauthenticate: Coroutine function returning a fresh token, used on 401.
        """
        self._token = token
        if reauthenticate is not None:
            self._reauthenticate = reauthenticate

    def clear_token(self) -> None:
        """Forget the token. Authenticated requests fail until a new one is set."""
        self._token = None
        self._reauthenticate = None

    @property
    def token(self) -> AuthToken | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        """Check if we have a token."""
        return self._token is not None

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
        auto_refresh: bool = True,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: API path relative to the base URL (e.g., "/folder?sort_by=name").
            json: JSON body for POST requests.
            params: Extra query parameters.
            authenticated: Whether to send the Authorization header.
            auto_refresh: Whether to re-authenticate and retry once on 401.

        Returns:
            Decoded JSON body.

        Raises:
            AuthenticationError: If an authenticated request is made without a token.
            NetworkError: If the request fails at the transport level.
            APIError: If the API returns a non-200 status.
            DecodeError: If the body is not valid JSON.
        """
        token = self._token  # Capture once for consistent reads
        headers = {}
        if authenticated:
            if token is None:
                msg = "Not authenticated"
                raise AuthenticationError(msg, endpoint=endpoint)
            headers["Authorization"] = token.header

        logger.debug(
            "API request",
            method=method,
            endpoint=endpoint,
            body=sanitize_for_log(json) if json else None,
        )
        client = self._ensure_client()
        try:
            response = await client.request(
                method=method,
                url=endpoint,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning("Request failed", endpoint=endpoint, error=str(e))
            msg = "Could not reach the Skyfish API"
            raise NetworkError(msg, endpoint=endpoint) from e

        if (
            response.status_code == HTTPStatus.UNAUTHORIZED
            and authenticated
            and auto_refresh
            and self._config.refresh_on_unauthorized
            and self._reauthenticate is not None
        ):
            logger.debug("Token rejected, re-authenticating", endpoint=endpoint)
            await self._refresh_token(stale_token=token)
            return await self.request(
                method,
                endpoint,
                json=json,
                params=params,
                authenticated=authenticated,
                auto_refresh=False,
            )

        if response.status_code != HTTPStatus.OK:
            raise status_error(
                response.status_code,
                endpoint,
                request_id=response.headers.get(REQUEST_ID_HEADER),
            )

        try:
            return response.json()
        except ValueError as e:
            msg = "Invalid JSON response from API"
            raise DecodeError(msg, endpoint=endpoint) from e

    async def request_raw(self, url: str, *, timeout: float | None = None) -> bytes:
        """
        Fetch a URL without authentication (for download locations).

        Security:
            Only pass URLs obtained from Skyfish API responses.

        Raises:
            NetworkError: If the download fails.
        """
        client = self._ensure_client()
        msg = "Download failed"
        try:
            response = await client.get(url, timeout=timeout or self._config.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(msg, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise NetworkError(msg) from e
        return response.content

    async def _refresh_token(self, stale_token: AuthToken | None) -> None:
        if self._token is not stale_token:
            logger.debug("Token already refreshed")
            return

        try:
            self._token = await self._reauthenticate()
        except AuthenticationError:
            self._token = None
            raise
        logger.debug("Token refreshed successfully")
