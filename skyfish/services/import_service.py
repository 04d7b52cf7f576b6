"""
Import of Skyfish items as local media entities.

Storage and file writing belong to the host application and are reached
through the ``MediaStore`` protocol.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol

import structlog

from skyfish.api.endpoints.media import get_download_url, get_item
from skyfish.api.http_client import AsyncHttpClient
from skyfish.exceptions import SkyfishError
from skyfish.models.media import MediaDraft, MediaRecord

logger = structlog.get_logger(__name__)

Downloader = Callable[[str], Awaitable[bytes]]


class MediaStore(Protocol):
    """Host-side storage for imported media."""

    def find_by_skyfish_id(self, skyfish_id: int) -> Any | None:
        """Return the local entity already imported for this item, if any."""
        ...

    def create(self, draft: MediaDraft) -> Any:
        """Create and persist a local entity; return it."""
        ...


class MediaImporter:
    """
    Imports selected Skyfish items.

    Items already imported are reused. Download URLs are requested just
    before downloading since they expire within minutes.
    """

    def __init__(
        self,
        http: AsyncHttpClient,
        store: MediaStore,
        *,
        downloader: Downloader | None = None,
    ) -> None:
        """
        Args:
            http: Async HTTP client.
            store: Host storage for media entities.
            downloader: Fetches a download URL; defaults to an unauthenticated GET.
        """
        self._http = http
        self._store = store
        self._download = downloader or http.request_raw

    async def import_items(self, item_ids: Iterable[int]) -> dict[int, Any]:
        """
        Import items, one at a time.

        Args:
            item_ids: Selected item IDs. Zero IDs (unselected) are ignored.

        Returns:
            Local entities keyed by item ID. Items that failed are absent.
        """
        imported = {}
        for item_id in item_ids:
            if not item_id:
                continue
            try:
                entity = await self.import_item(item_id)
            except SkyfishError as e:
                logger.error("Failed to fetch media item", item_id=item_id, error=str(e))
                continue
            if entity is not None:
                imported[item_id] = entity
        return imported

    async def import_item(self, item_id: int) -> Any | None:
        """
        Import one item, or return the entity imported earlier.

        Returns:
            The local entity, or None if the item type is unsupported or the
            store rejected it.

        Raises:
            SkyfishError: If the item or its download cannot be fetched.
        """
        if (existing := self._store.find_by_skyfish_id(item_id)) is not None:
            logger.debug("Media item already imported", item_id=item_id)
            return existing

        record = MediaRecord(raw=await get_item(self._http, item_id))
        if record.bundle is None:
            logger.warning("Unsupported media type", item_id=item_id, media_type=record.media_type)
            return None

        url = await get_download_url(self._http, item_id)
        draft = MediaDraft(
            skyfish_id=item_id,
            bundle=record.bundle,
            filename=record.filename,
            alt_text=record.alt_text,
            content=await self._download(url),
        )

        try:
            entity = self._store.create(draft)
        except Exception as e:
            logger.error("Error saving media item", item_id=item_id, error=str(e))
            return None

        logger.info("Media item imported", item_id=item_id, bundle=draft.bundle)
        return entity
