"""
Skyfish client configuration.
"""

import os
from dataclasses import dataclass

DEFAULT_CACHE_MINUTES = 0
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True, kw_only=True)
class Credentials:
    """
    Account credentials and per-account settings.

    Supplied by the host application for each client instance and never
    persisted by this package.

    Attributes:
        username: Skyfish username (email).
        password: Skyfish password.
        api_key: API key issued for the account.
        hmac_secret: Shared secret used to sign authentication requests.
        cache_ttl_minutes: How long folder listings stay cached. 0 (the default)
            disables caching.
        page_size: Default number of items requested per search page.
    """

    username: str
    password: str
    api_key: str
    hmac_secret: str
    cache_ttl_minutes: int = DEFAULT_CACHE_MINUTES
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.cache_ttl_minutes < 0:
            msg = "cache_ttl_minutes must be non-negative"
            raise ValueError(msg)
        if self.page_size <= 0:
            msg = "page_size must be positive"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(username={self.username!r}, password='***', "
            f"api_key='***', hmac_secret='***', cache_ttl_minutes={self.cache_ttl_minutes}, "
            f"page_size={self.page_size})"
        )

    @classmethod
    def from_env(cls, prefix: str = "SKYFISH_") -> "Credentials":
        """
        Read credentials from environment variables.

        Reads ``<prefix>USERNAME``, ``<prefix>PASSWORD``, ``<prefix>API_KEY``,
        ``<prefix>API_SECRET`` and the optional ``<prefix>CACHE_MINUTES`` and
        ``<prefix>PAGE_SIZE``. Missing credentials become empty strings, which
        the service rejects at authentication time.
        """
        return cls(
            username=os.getenv(f"{prefix}USERNAME", ""),
            password=os.getenv(f"{prefix}PASSWORD", ""),
            api_key=os.getenv(f"{prefix}API_KEY", ""),
            hmac_secret=os.getenv(f"{prefix}API_SECRET", ""),
            cache_ttl_minutes=int(os.getenv(f"{prefix}CACHE_MINUTES", DEFAULT_CACHE_MINUTES)),
            page_size=int(os.getenv(f"{prefix}PAGE_SIZE", DEFAULT_PAGE_SIZE)),
        )


@dataclass(frozen=True, kw_only=True)
class SkyfishConfig:
    """
    Attributes:
        api_url: Base URL for the Skyfish API.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        auth_scheme: Scheme prefix of the Authorization header.
        thumbnail_size: Thumbnail size requested with search results.
        refresh_on_unauthorized: Re-authenticate once and retry when a request gets HTTP 401.
        cache_max_size: Maximum number of entries in the in-memory response cache.
    """

    api_url: str = "https://api.colourbox.com"
    timeout: float = 30.0
    user_agent: str = "Skyfish-Python/0.1"
    auth_scheme: str = "CBX-SIMPLE-TOKEN"
    thumbnail_size: str = "320px"
    refresh_on_unauthorized: bool = True
    cache_max_size: int = 1000

    def __post_init__(self) -> None:
        if not self.api_url:
            msg = "api_url must not be empty"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if not self.auth_scheme:
            msg = "auth_scheme must not be empty"
            raise ValueError(msg)
        if self.cache_max_size <= 0:
            msg = "cache_max_size must be positive"
            raise ValueError(msg)
