"""
Skyfish API client layer.

Provides async HTTP communication with the Skyfish API.
"""

from skyfish.api.http_client import AsyncHttpClient, sanitize_for_log, status_error

__all__ = ["AsyncHttpClient", "sanitize_for_log", "status_error"]
