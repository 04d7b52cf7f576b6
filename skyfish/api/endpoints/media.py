"""Media item endpoints."""

from typing import Any

from skyfish.api.http_client import AsyncHttpClient
from skyfish.exceptions import DecodeError


async def get_item(http: AsyncHttpClient, item_id: int) -> dict[str, Any]:
    """Get item details (filename, id, type, metadata, ...)."""
    return await http.request("GET", f"/media/{item_id}")


async def get_filename(http: AsyncHttpClient, item_id: int) -> str:
    """
    Get the item's filename.

    Raises:
        DecodeError: If the response has no ``filename``.
    """
    return _field(await get_item(http, item_id), "filename", f"/media/{item_id}")


async def get_download_url(http: AsyncHttpClient, item_id: int) -> str:
    """
    Get a download URL for the item.

    The URL is only valid for a few minutes after it is issued.

    Raises:
        DecodeError: If the response has no ``url``.
    """
    endpoint = f"/media/{item_id}/download_location"
    return _field(await http.request("GET", endpoint), "url", endpoint)


def _field(data: Any, name: str, endpoint: str) -> Any:
    try:
        return data[name]
    except (KeyError, TypeError) as e:
        msg = f"Response has no '{name}'"
        raise DecodeError(msg, endpoint=endpoint) from e
