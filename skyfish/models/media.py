"""
Media item models.

Skyfish media records are passed through mostly verbatim; the accessors here
read the handful of fields the package itself needs.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class MediaBundle(StrEnum):
    """Local media bundle an item is imported as."""

    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"


BUNDLE_BY_TYPE: dict[str, MediaBundle] = {
    "stock": MediaBundle.IMAGE,
    "image": MediaBundle.IMAGE,
    "vector": MediaBundle.IMAGE,
    "video": MediaBundle.VIDEO,
    "generic": MediaBundle.DOCUMENT,
}


@dataclass(frozen=True)
class MediaRecord:
    """A media record from search results or an item detail response."""

    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def media_id(self) -> int | None:
        value = self.raw.get("unique_media_id", self.raw.get("id"))
        return int(value) if value is not None else None

    @property
    def filename(self) -> str:
        return self.raw.get("filename") or ""

    @property
    def media_type(self) -> str:
        return self.raw.get("type") or ""

    @property
    def title(self) -> str:
        """
        Title of the item.

        Search results carry a plain ``title``; item details carry
        ``metadata.title`` keyed by language, of which the first is used.
        """
        if title := self.raw.get("title"):
            return title if isinstance(title, str) else next(iter(title.values()), "")
        titles = (self.raw.get("metadata") or {}).get("title") or {}
        if isinstance(titles, dict):
            return next((t for t in titles.values() if t), "")
        return titles if isinstance(titles, str) else ""

    @property
    def alt_text(self) -> str:
        return self.title or self.filename

    @property
    def description(self) -> str:
        return self.raw.get("description") or ""

    @property
    def byline(self) -> str:
        return self.raw.get("byline") or ""

    @property
    def copyright(self) -> str:
        return self.raw.get("copyright") or ""

    @property
    def keywords(self) -> list[str]:
        return list(self.raw.get("keywords") or [])

    @property
    def folder_ids(self) -> list[int]:
        return [int(i) for i in self.raw.get("folder_ids") or []]

    @property
    def thumbnail_url(self) -> str:
        return self.raw.get("thumbnail_url_ssl") or self.raw.get("thumbnail_url") or ""

    @property
    def file_disksize(self) -> int:
        return int(self.raw.get("file_disksize") or 0)

    @property
    def width(self) -> int:
        return int(self.raw.get("width") or 0)

    @property
    def height(self) -> int:
        return int(self.raw.get("height") or 0)

    @property
    def megapixels(self) -> float | None:
        if not self.width:
            return None
        return round(self.width * self.height / 1e6, 1)

    @property
    def created_date(self) -> str:
        """Creation date as ``YYYY-MM-DD``."""
        return (self.raw.get("created") or "")[:10]

    @property
    def bundle(self) -> MediaBundle | None:
        return BUNDLE_BY_TYPE.get(self.media_type)


@dataclass(frozen=True, kw_only=True)
class MediaDraft:
    """
    Data for a local media entity about to be created.

    Attributes:
        skyfish_id: ID of the source item.
        bundle: Local bundle to create.
        filename: File name of the downloaded asset.
        alt_text: Alternative text for images.
        content: Downloaded file content.
    """

    skyfish_id: int
    bundle: MediaBundle
    filename: str
    alt_text: str = ""
    content: bytes = b""
