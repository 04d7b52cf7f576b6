"""
Search-related domain models.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Self

from skyfish.config import DEFAULT_PAGE_SIZE
from skyfish.models.media import MediaRecord


class MediaType(StrEnum):
    """Media types the search endpoint can filter on."""

    IMAGE = "image"
    VECTOR = "vector"
    VIDEO = "video"
    GENERIC = "generic"


class SortOrder(StrEnum):
    """Result ordering."""

    RELEVANCE = "relevance"
    CREATED = "created"


class ResultSummary(StrEnum):
    """How a result page relates to the whole result set."""

    NONE = "none"
    ONE = "one"
    ALL = "all"
    FIRST_PAGE = "first_page"
    LATER_PAGE = "later_page"


@dataclass(frozen=True, kw_only=True)
class SearchQuery:
    """
    Parameters of one search request.

    Attributes:
        text: Free-text search terms; empty browses everything.
        folder_ids: Folder IDs to limit the search to; empty searches all folders.
        offset: Index of the first result to return.
        page_size: Number of results to return.
        media_types: Media types to include; empty includes all types.
        order: Result ordering.
    """

    text: str = ""
    folder_ids: tuple[int, ...] = ()
    offset: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    media_types: frozenset[MediaType] = frozenset()
    order: SortOrder = SortOrder.RELEVANCE

    def __post_init__(self) -> None:
        if self.offset < 0:
            msg = "offset must be non-negative"
            raise ValueError(msg)
        if self.page_size <= 0:
            msg = "page_size must be positive"
            raise ValueError(msg)

    @property
    def folder_scope(self) -> str:
        """Comma-joined folder IDs, or an empty string for all folders."""
        return ",".join(str(i) for i in self.folder_ids)

    def for_page(self, page: int, per_page: int | None = None) -> Self:
        """
        Return a copy positioned on a 1-based page.

        Args:
            page: Page number, starting at 1.
            per_page: Page size; keeps the current one if omitted.
        """
        if page < 1:
            msg = "page must be at least 1"
            raise ValueError(msg)
        size = per_page or self.page_size
        return replace(self, offset=(page - 1) * size, page_size=size)


def parse_folder_scope(scope: str | Iterable[int] | None) -> tuple[int, ...]:
    """Normalize a comma-joined string or an iterable of IDs to a tuple of IDs."""
    if not scope:
        return ()
    if isinstance(scope, str):
        return tuple(int(part) for part in scope.split(",") if part.strip())
    return tuple(int(i) for i in scope)


@dataclass(frozen=True, kw_only=True)
class SearchResultPage:
    """
    One page of search results.

    Attributes:
        total_found: Total number of hits for the query.
        item_count: Number of items on this page.
        offset: Offset of this page in the result set.
        items: Media records, in the order the API returned them.
        malformed: True when the response lacked the expected result structure.
    """

    total_found: int = 0
    item_count: int = 0
    offset: int = 0
    items: tuple[MediaRecord, ...] = field(default_factory=tuple)
    malformed: bool = False

    @classmethod
    def empty(cls, *, malformed: bool = False) -> Self:
        return cls(malformed=malformed)

    @classmethod
    def from_api(cls, data: Any) -> Self:
        """
        Normalize a search response.

        A response without a ``response.media`` list, or with counts that are
        not integers, yields an empty page flagged as malformed instead of
        failing.
        """
        response = data.get("response") if isinstance(data, dict) else None
        media = response.get("media") if isinstance(response, dict) else None
        if not isinstance(media, list) or not all(isinstance(m, dict) for m in media):
            return cls.empty(malformed=True)
        try:
            return cls(
                total_found=int(response.get("hits", 0)),
                item_count=int(data.get("media_count", len(media))),
                offset=int(data.get("media_offset", 0)),
                items=tuple(MediaRecord(raw=item) for item in media),
            )
        except (TypeError, ValueError):
            return cls.empty(malformed=True)

    @property
    def is_empty(self) -> bool:
        return self.total_found == 0

    def total_pages(self, per_page: int) -> int:
        return math.ceil(self.total_found / per_page) if per_page > 0 else 0

    def summary(self) -> ResultSummary:
        """Classify this page for display."""
        if self.offset != 0:
            return ResultSummary.LATER_PAGE
        if self.total_found == 0:
            return ResultSummary.NONE
        if self.total_found == 1:
            return ResultSummary.ONE
        if self.total_found == self.item_count:
            return ResultSummary.ALL
        return ResultSummary.FIRST_PAGE

    def describe(self, per_page: int, page: int = 1) -> str:
        """
        Human-readable summary line.

        Args:
            per_page: Page size used for the search.
            page: 1-based page number this result belongs to.
        """
        pages = self.total_pages(per_page)
        match self.summary():
            case ResultSummary.NONE:
                return "Found no items for this search."
            case ResultSummary.ONE:
                return "Found one item for this search:"
            case ResultSummary.ALL:
                return f"Found {self.total_found} items, showing all {self.item_count}:"
            case ResultSummary.FIRST_PAGE:
                return (
                    f"Found {self.total_found} items, showing items 1 to {self.item_count} "
                    f"(page 1 of {pages}):"
                )
        start = self.offset + 1
        end = self.offset + self.item_count
        return (
            f"Found {self.total_found} items, showing {start} to {end} "
            f"(page {page} of {pages}):"
        )
