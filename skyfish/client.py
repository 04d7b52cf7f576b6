"""
Skyfish client facade.

This is the main entry point for users of the library. Failures never escape
it as exceptions: each method logs the ``SkyfishError`` it caught and returns
``None`` or an empty value instead.
"""

from collections.abc import Collection, Iterable
from typing import Any, Self, TypeVar

import httpx
import structlog

from skyfish.api.endpoints.media import get_download_url, get_filename, get_item
from skyfish.api.http_client import AsyncHttpClient
from skyfish.config import Credentials, SkyfishConfig
from skyfish.core.cache import CacheBackend, MemoryCache
from skyfish.exceptions import InvalidCredentialsError, SkyfishError
from skyfish.models.auth import AuthToken
from skyfish.models.folder import Folder, FolderNode
from skyfish.models.media import MediaRecord
from skyfish.models.search import SearchQuery, SearchResultPage
from skyfish.services.auth_service import INVALID_LOGIN_MESSAGE, AuthService
from skyfish.services.folder_service import FolderService, folder_options
from skyfish.services.import_service import Downloader, MediaImporter, MediaStore
from skyfish.services.search_service import SearchService, SearchSession

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SkyfishClient:
    """
    Async client for Skyfish.

    Entering the context authenticates once; the token is reused for the
    client's lifetime and renewed once if the API rejects it.

    Example:
        ```python
        credentials = Credentials.from_env()
        async with SkyfishClient(credentials, principal_id=user.id) as client:
            if not client.is_authenticated:
                ...

            for root in await client.folder_tree():
                print(root.format_tree())

            page = await client.search(SearchQuery(text="harbour", page_size=20))
            print(page.describe(per_page=20))
        ```

    Args:
        credentials: Account credentials.
        config: Client configuration. Uses defaults if not provided.
        principal_id: Identity of the calling user, used to key cached listings.
        cache: Cache store shared between clients; an in-memory one if omitted.
        transport: Optional httpx transport for testing (mock transport).
    """

    def __init__(
        self,
        credentials: Credentials,
        config: SkyfishConfig | None = None,
        *,
        principal_id: str | int = "anonymous",
        cache: CacheBackend | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._config = config or SkyfishConfig()
        self._principal_id = principal_id
        self._cache = cache if cache is not None else MemoryCache(self._config.cache_max_size)
        self._transport = transport

        self._http: AsyncHttpClient | None = None
        self._auth_service: AuthService | None = None
        self._folder_service: FolderService | None = None
        self._search_service: SearchService | None = None

    async def __aenter__(self) -> Self:
        """Enter async context and authenticate."""
        self._initialize()
        await self.authenticate()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit async context."""
        await self.close()

    def _initialize(self) -> None:
        if self._http is not None:
            return

        self._http = AsyncHttpClient(self._config, transport=self._transport)
        self._auth_service = AuthService(
            self._http, self._credentials, scheme=self._config.auth_scheme
        )
        self._folder_service = FolderService(
            self._http,
            self._cache,
            principal_id=self._principal_id,
            ttl_minutes=self._credentials.cache_ttl_minutes,
        )
        self._search_service = SearchService(
            self._http, thumbnail_size=self._config.thumbnail_size
        )
        logger.debug("Client initialized")

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._http is not None:
            await self._http.close()
        self._http = None
        self._auth_service = None
        self._folder_service = None
        self._search_service = None
        logger.debug("Client closed")

    @property
    def config(self) -> SkyfishConfig:
        return self._config

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def is_authenticated(self) -> bool:
        """Check if a token is held."""
        return self._http is not None and self._http.is_authenticated

    @property
    def authorization_header(self) -> str | None:
        """Authorization header value, or None when authentication failed."""
        if self._http is None or self._http.token is None:
            return None
        return self._http.token.header

    async def authenticate(self) -> AuthToken | None:
        """
        Authenticate and keep the token for later requests.

        Returns:
            The token, or None if authentication failed. A failed attempt
            leaves the client without a token; every request then fails.
        """
        auth = self._require(self._auth_service)
        try:
            return await auth.login()
        except SkyfishError as e:
            logger.error("Authentication failed", error=str(e))
            return None

    async def validate_credentials(self, credentials: Credentials) -> str | None:
        """
        Check candidate credentials without touching this client's token.

        Returns:
            None if the credentials authenticate, otherwise a message
            suitable for a settings form.
        """
        http = self._require(self._http)
        auth = AuthService(http, credentials, scheme=self._config.auth_scheme)
        try:
            await auth.authenticate()
        except InvalidCredentialsError:
            return INVALID_LOGIN_MESSAGE
        except SkyfishError as e:
            logger.warning("Credential check failed", error=str(e))
            return INVALID_LOGIN_MESSAGE
        return None

    async def request(self, path: str) -> Any | None:
        """
        Authenticated GET of an API path.

        Returns:
            Decoded JSON, or None on any failure.
        """
        http = self._require(self._http)
        try:
            return await http.request("GET", path)
        except SkyfishError as e:
            logger.error("Request failed", endpoint=path, error=str(e))
            return None

    async def get_folders(self) -> list[Folder] | None:
        """
        List folders through the per-user cache.

        Returns:
            Folders ordered by name, or None on failure.
        """
        folders = self._require(self._folder_service)
        try:
            return await folders.get_folders()
        except SkyfishError as e:
            logger.error("Folder listing failed", error=str(e))
            return None

    async def get_folders_without_cache(self) -> list[Folder] | None:
        folders = self._require(self._folder_service)
        try:
            return await folders.get_folders_without_cache()
        except SkyfishError as e:
            logger.error("Folder listing failed", error=str(e))
            return None

    async def folder_tree(self) -> list[FolderNode]:
        """
        Folder hierarchy for the current user.

        Returns:
            Root nodes; empty if no folders could be listed or arranged.
        """
        folders = self._require(self._folder_service)
        try:
            roots = await folders.build_tree()
        except SkyfishError as e:
            logger.error("Folder tree unavailable", error=str(e))
            roots = []
        if not roots:
            logger.error("No folders found. Check Skyfish user permissions and settings.")
        return roots

    async def folder_path_names(
        self, folder_ids: Iterable[int], root_folder_id: int = 0
    ) -> list[str]:
        """Path labels for folder IDs; empty on failure."""
        folders = self._require(self._folder_service)
        try:
            return await folders.path_names(folder_ids, root_folder_id)
        except SkyfishError as e:
            logger.error("Folder path lookup failed", error=str(e))
            return []

    async def folder_options(
        self,
        root_folder_id: int = 0,
        omit_folder_ids: Collection[int] = (),
    ) -> list[tuple[int | str, str]]:
        """Folder choices for the top three levels; see ``folder_options``."""
        return folder_options(await self.folder_tree(), root_folder_id, omit_folder_ids)

    def invalidate_folders(self) -> None:
        """Drop this user's cached folder listing."""
        self._require(self._folder_service).invalidate()

    def new_session(self) -> SearchSession:
        """Search session preset with the configured page size."""
        return SearchSession(page_size=self._credentials.page_size)

    async def search(self, query: SearchQuery | SearchSession | str = "") -> SearchResultPage:
        """
        Search the media catalog.

        Args:
            query: A query, a session (searched with empty text), or plain text
                searched with default parameters.

        Returns:
            The result page; an empty page on failure.
        """
        service = self._require(self._search_service)
        if isinstance(query, SearchSession):
            query = query.to_query()
        elif isinstance(query, str):
            query = SearchQuery(text=query, page_size=self._credentials.page_size)
        try:
            return await service.search(query)
        except SkyfishError as e:
            logger.error("Search failed", error=str(e))
            return SearchResultPage.empty()

    async def get_item(self, item_id: int) -> MediaRecord | None:
        """Item details, or None on failure."""
        http = self._require(self._http)
        try:
            return MediaRecord(raw=await get_item(http, item_id))
        except SkyfishError as e:
            logger.error("Item lookup failed", item_id=item_id, error=str(e))
            return None

    async def get_filename(self, item_id: int) -> str | None:
        """Filename of an item, or None if it cannot be fetched or is missing."""
        http = self._require(self._http)
        try:
            return await get_filename(http, item_id)
        except SkyfishError as e:
            logger.error("Filename lookup failed", item_id=item_id, error=str(e))
            return None

    async def get_item_download_url(self, item_id: int) -> str | None:
        """
        Download URL of an item.

        The URL expires a few minutes after it is issued, so fetch it right
        before downloading.

        Returns:
            The URL, or None if it cannot be fetched or is missing.
        """
        http = self._require(self._http)
        try:
            return await get_download_url(http, item_id)
        except SkyfishError as e:
            logger.error("Download location lookup failed", item_id=item_id, error=str(e))
            return None

    async def import_items(
        self,
        item_ids: Iterable[int],
        store: MediaStore,
        *,
        downloader: Downloader | None = None,
    ) -> dict[int, Any]:
        """
        Import items as local media entities.

        Returns:
            Local entities keyed by item ID; failed items are absent.
        """
        importer = MediaImporter(self._require(self._http), store, downloader=downloader)
        return await importer.import_items(item_ids)

    @staticmethod
    def _require(component: T | None) -> T:
        if component is None:
            msg = "Client not initialized. Use 'async with' first."
            raise RuntimeError(msg)
        return component
