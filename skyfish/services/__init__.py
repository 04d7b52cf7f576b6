"""
Business logic services for Skyfish.
"""

from skyfish.services.auth_service import AuthService
from skyfish.services.folder_service import FolderService
from skyfish.services.import_service import MediaImporter, MediaStore
from skyfish.services.search_service import SearchService, SearchSession

__all__ = [
    "AuthService",
    "FolderService",
    "MediaImporter",
    "MediaStore",
    "SearchService",
    "SearchSession",
]
