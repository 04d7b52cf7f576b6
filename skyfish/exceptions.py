"""
Skyfish exception hierarchy.

All exceptions inherit from SkyfishError for easy catching.
"""

from typing import Any


class SkyfishError(Exception):
    """Base exception for all skyfish errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class NetworkError(SkyfishError):
    """Network-level error (connection failed, timeout)."""


class AuthenticationError(SkyfishError):
    """Authentication failed or no token is available."""


class InvalidCredentialsError(AuthenticationError):
    """Username, password, key or secret missing or rejected."""


class TokenMissingError(AuthenticationError):
    """Authentication response did not contain a token."""


class DecodeError(SkyfishError):
    """Response body is not valid JSON or lacks an expected field."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, endpoint=endpoint)
        self.endpoint = endpoint


class APIError(SkyfishError):
    """API request returned a non-200 status."""

    def __init__(self, message: str, *, code: int, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)
        self.code = code
        self.endpoint = endpoint


class BadRequestError(APIError):
    """Malformed request (400)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=400, endpoint=endpoint)


class UnauthorizedError(APIError):
    """Not logged in (401)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=401, endpoint=endpoint)


class ForbiddenError(APIError):
    """No access to the resource (403)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=403, endpoint=endpoint)


class NotFoundError(APIError):
    """Resource not found, or method not allowed on it (404)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=404, endpoint=endpoint)


class ConflictError(APIError):
    """Update conflict (409)."""

    def __init__(self, message: str, *, endpoint: str | None = None) -> None:
        super().__init__(message, code=409, endpoint=endpoint)


class ServerError(APIError):
    """Server-side error (5xx)."""

    def __init__(
        self,
        message: str,
        *,
        code: int = 500,
        endpoint: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, code=code, endpoint=endpoint)
        self.request_id = request_id
        if request_id is not None:
            self.context["request_id"] = request_id


class FolderTreeError(SkyfishError):
    """Folder listing cannot be arranged into a tree."""


class FolderCycleError(FolderTreeError):
    """Parent references form a cycle."""

    def __init__(self, message: str, *, folder_ids: tuple[int, ...]) -> None:
        super().__init__(message, folder_ids=folder_ids)
        self.folder_ids = folder_ids
