"""
Authentication-related domain models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True, kw_only=True)
class AuthToken:
    """
    Token returned by the Skyfish authentication endpoint.

    Held in memory only; a new one is obtained per client instance.

    Attributes:
        token: Opaque token string.
        scheme: Authorization scheme the token is presented with.
        issued_at: When the token was obtained.
    """

    token: str
    scheme: str
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def header(self) -> str:
        """Value of the Authorization header carrying this token."""
        return f"{self.scheme} Token={self.token}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(token='***', scheme={self.scheme!r})"
