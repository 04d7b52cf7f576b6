"""
Search service for Skyfish.

``SearchService.search`` takes an immutable ``SearchQuery``. ``SearchSession``
keeps setter-style state for callers that configure a search step by step
(folder scope from one widget, paging from another) and turns it into a
query at search time.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from skyfish.api.endpoints.search import DEFAULT_THUMBNAIL_SIZE, search
from skyfish.api.http_client import AsyncHttpClient
from skyfish.config import DEFAULT_PAGE_SIZE
from skyfish.models.search import (
    MediaType,
    SearchQuery,
    SearchResultPage,
    SortOrder,
    parse_folder_scope,
)

logger = structlog.get_logger(__name__)


class SearchService:
    """Runs searches against the API."""

    def __init__(
        self, http: AsyncHttpClient, *, thumbnail_size: str = DEFAULT_THUMBNAIL_SIZE
    ) -> None:
        self._http = http
        self._thumbnail_size = thumbnail_size

    async def search(self, query: SearchQuery) -> SearchResultPage:
        """
        Run a search.

        Raises:
            SkyfishError: If the request fails.
        """
        page = await search(self._http, query, thumbnail_size=self._thumbnail_size)
        logger.debug(
            "Search completed",
            total_found=page.total_found,
            item_count=page.item_count,
            offset=page.offset,
        )
        return page


@dataclass(kw_only=True)
class SearchSession:
    """
    Mutable search state.

    All setters are independent and may be called in any order before
    ``to_query`` or ``search``.
    """

    folder_ids: tuple[int, ...] = ()
    offset: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    media_types: frozenset[MediaType] = field(default_factory=frozenset)
    order: SortOrder = SortOrder.RELEVANCE

    def set_folder_ids(self, scope: str | Iterable[int] | None = "") -> None:
        """Limit the search to folders, given as IDs or a comma-joined string."""
        self.folder_ids = parse_folder_scope(scope)

    def set_offset_count(self, offset: int = 0, count: int = DEFAULT_PAGE_SIZE) -> None:
        self.offset = offset
        self.page_size = count

    def set_media_types(self, media_types: Iterable[MediaType | str]) -> None:
        """Limit the search to media types; empty means all types."""
        self.media_types = frozenset(MediaType(t) for t in media_types)

    def set_order(self, order: SortOrder | str) -> None:
        self.order = SortOrder(order)

    def to_query(self, text: str = "") -> SearchQuery:
        return SearchQuery(
            text=text or "",
            folder_ids=self.folder_ids,
            offset=self.offset,
            page_size=self.page_size,
            media_types=self.media_types,
            order=self.order,
        )

    async def search(self, service: SearchService, text: str = "") -> SearchResultPage:
        """Search with the current state."""
        return await service.search(self.to_query(text))
