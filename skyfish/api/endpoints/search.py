"""Search endpoint."""

from urllib.parse import quote_plus

import structlog

from skyfish.api.http_client import AsyncHttpClient
from skyfish.models.search import SearchQuery, SearchResultPage

logger = structlog.get_logger(__name__)

SEARCH_PATH = "/search"
RETURN_VALUES = (
    "title",
    "description",
    "byline",
    "copyright",
    "unique_media_id",
    "thumbnail_url_ssl",
    "keywords",
    "filename",
    "created",
    "folder_ids",
    "file_disksize",
    "width",
    "height",
)
DEFAULT_THUMBNAIL_SIZE = "320px"


def build_search_path(query: SearchQuery, *, thumbnail_size: str = DEFAULT_THUMBNAIL_SIZE) -> str:
    """
    Build the search path with its query string.

    Parameters with default or empty values (text, folder scope, media types,
    zero offset) are left out. Lists are ``+``-joined, as the API expects.
    """
    options = []
    if query.text:
        options.append(f"q={quote_plus(query.text)}")
    options.append(f"media_count={query.page_size}")
    options.append("recursive=true")
    options.append(f"return_values={'+'.join(RETURN_VALUES)}")
    options.append(f"order={query.order}")
    options.append(f"thumbnail_size={thumbnail_size}")
    if query.folder_ids:
        options.append(f"folder_ids={query.folder_scope}")
    if query.media_types:
        options.append(f"media_type={'+'.join(sorted(query.media_types))}")
    if query.offset:
        options.append(f"media_offset={query.offset}")
    return f"{SEARCH_PATH}?{'&'.join(options)}"


async def search(
    http: AsyncHttpClient,
    query: SearchQuery,
    *,
    thumbnail_size: str = DEFAULT_THUMBNAIL_SIZE,
) -> SearchResultPage:
    """
    Run a search and normalize the response into a page.

    Returns:
        The result page; an empty page flagged ``malformed`` if the response
        lacked the expected structure.
    """
    path = build_search_path(query, thumbnail_size=thumbnail_size)
    page = SearchResultPage.from_api(await http.request("GET", path))
    if page.malformed:
        logger.warning("Search response has no media list", endpoint=path)
    return page
