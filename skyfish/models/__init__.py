"""
Domain models for Skyfish.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from skyfish.models.auth import AuthToken
from skyfish.models.folder import Folder, FolderNode
from skyfish.models.media import BUNDLE_BY_TYPE, MediaBundle, MediaDraft, MediaRecord
from skyfish.models.search import (
    MediaType,
    ResultSummary,
    SearchQuery,
    SearchResultPage,
    SortOrder,
    parse_folder_scope,
)

__all__ = [
    # Auth
    "AuthToken",
    # Folders
    "Folder",
    "FolderNode",
    # Media
    "BUNDLE_BY_TYPE",
    "MediaBundle",
    "MediaDraft",
    "MediaRecord",
    # Search
    "MediaType",
    "ResultSummary",
    "SearchQuery",
    "SearchResultPage",
    "SortOrder",
    "parse_folder_scope",
]
