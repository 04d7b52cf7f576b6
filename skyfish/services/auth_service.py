"""
Authentication service for Skyfish.

Signs credentials, exchanges them for a token, and installs the token on the
HTTP client so later requests carry it.
"""

import hashlib
import hmac
import time
from collections.abc import Callable

import structlog

from skyfish.api.endpoints.auth import authenticate
from skyfish.api.http_client import AsyncHttpClient
from skyfish.config import Credentials
from skyfish.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    DecodeError,
    ForbiddenError,
    InvalidCredentialsError,
    TokenMissingError,
    UnauthorizedError,
)
from skyfish.models.auth import AuthToken

logger = structlog.get_logger(__name__)

INVALID_LOGIN_MESSAGE = "Incorrect login information: check Username, Password and API key."


def sign(api_key: str, secret: str, ts: int) -> str:
    """
    Compute the request signature for the userpasshmac login.

    Args:
        api_key: API key.
        secret: Shared secret.
        ts: Unix timestamp sent along with the signature.

    Returns:
        Hex HMAC-SHA1 of ``"<api_key>:<ts>"`` keyed by the secret.
    """
    message = f"{api_key}:{ts}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha1).hexdigest()


class AuthService:
    """
    Handles Skyfish authentication.

    The token lives in AsyncHttpClient; this service only knows how to get one.
    """

    def __init__(
        self,
        http_client: AsyncHttpClient,
        credentials: Credentials,
        *,
        scheme: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            http_client: HTTP client for API requests.
            credentials: Account credentials.
            scheme: Authorization scheme the token is presented with.
            clock: Time source for the signature timestamp.
        """
        self._http = http_client
        self._credentials = credentials
        self._scheme = scheme
        self._clock = clock

    @property
    def is_authenticated(self) -> bool:
        return self._http.is_authenticated

    async def authenticate(self) -> AuthToken:
        """
        Obtain a token for the configured credentials.

        Does not install it; see ``login``.

        Returns:
            The new token.

        Raises:
            InvalidCredentialsError: If credentials are empty or rejected.
            TokenMissingError: If the response carries no token.
            AuthenticationError: If the service fails for another reason.
            NetworkError: If the service cannot be reached.
        """
        creds = self._credentials
        if not (creds.username and creds.password and creds.api_key and creds.hmac_secret):
            msg = "Username, password, API key and secret are required"
            raise InvalidCredentialsError(msg)

        ts = int(self._clock())
        logger.info("Authenticating", username=creds.username)
        try:
            response = await authenticate(
                self._http,
                username=creds.username,
                password=creds.password,
                key=creds.api_key,
                ts=ts,
                hmac=sign(creds.api_key, creds.hmac_secret, ts),
            )
        except (BadRequestError, UnauthorizedError, ForbiddenError) as e:
            raise InvalidCredentialsError(INVALID_LOGIN_MESSAGE, code=e.code) from e
        except APIError as e:
            msg = "Authentication failed"
            raise AuthenticationError(msg, code=e.code) from e
        except DecodeError as e:
            msg = "Authentication response is not JSON"
            raise TokenMissingError(msg) from e

        token = response.get("token") if isinstance(response, dict) else None
        if not token:
            msg = "Authentication response has no token"
            raise TokenMissingError(msg)

        logger.info("Authentication successful")
        return AuthToken(token=token, scheme=self._scheme)

    async def login(self) -> AuthToken:
        """
        Authenticate and install the token on the HTTP client.

        On failure the client's previous token is cleared, so no request is
        sent as if authenticated.

        Raises:
            Same as ``authenticate``.
        """
        try:
            token = await self.authenticate()
        except Exception:
            self._http.clear_token()
            raise
        self._http.set_token(token, reauthenticate=self.authenticate)
        return token

    def logout(self) -> None:
        """Forget the token."""
        self._http.clear_token()
