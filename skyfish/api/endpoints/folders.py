"""Folder listing endpoint."""

from skyfish.api.http_client import AsyncHttpClient
from skyfish.exceptions import DecodeError
from skyfish.models.folder import Folder

FOLDERS_PATH = "/folder?sort_by=name"


async def get_folders(http: AsyncHttpClient) -> list[Folder]:
    """
    List every folder the account can see, ordered by name.

    Raises:
        DecodeError: If the response is not a list of folder objects.
    """
    response = await http.request("GET", FOLDERS_PATH)
    if not isinstance(response, list):
        msg = "Expected a list of folders"
        raise DecodeError(msg, endpoint=FOLDERS_PATH)
    try:
        return [Folder.from_api(f) for f in response]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        msg = "Malformed folder record"
        raise DecodeError(msg, endpoint=FOLDERS_PATH) from e
