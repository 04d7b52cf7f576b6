"""
Skyfish Python Client.

An async client for the Skyfish digital asset management API: authentication,
folder hierarchy, media search and import.

Example:
    ```python
    from skyfish import Credentials, SearchQuery, SkyfishClient

    async with SkyfishClient(Credentials.from_env(), principal_id="editor-1") as client:
        for root in await client.folder_tree():
            print(root.format_tree())

        page = await client.search(SearchQuery(text="harbour"))
        print(page.describe(per_page=20))
    ```
"""

from skyfish.client import SkyfishClient
from skyfish.config import Credentials, SkyfishConfig
from skyfish.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DecodeError,
    FolderCycleError,
    FolderTreeError,
    ForbiddenError,
    InvalidCredentialsError,
    NetworkError,
    NotFoundError,
    ServerError,
    SkyfishError,
    TokenMissingError,
    UnauthorizedError,
)
from skyfish.models.folder import Folder, FolderNode
from skyfish.models.media import MediaBundle, MediaDraft, MediaRecord
from skyfish.models.search import (
    MediaType,
    ResultSummary,
    SearchQuery,
    SearchResultPage,
    SortOrder,
)
from skyfish.services.search_service import SearchSession

__version__ = "0.1.0"

__all__ = [
    # Main client
    "SkyfishClient",
    "SkyfishConfig",
    "Credentials",
    # Models
    "Folder",
    "FolderNode",
    "MediaBundle",
    "MediaDraft",
    "MediaRecord",
    "MediaType",
    "ResultSummary",
    "SearchQuery",
    "SearchResultPage",
    "SearchSession",
    "SortOrder",
    # Exceptions
    "SkyfishError",
    "NetworkError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "TokenMissingError",
    "DecodeError",
    "APIError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    "FolderTreeError",
    "FolderCycleError",
]
