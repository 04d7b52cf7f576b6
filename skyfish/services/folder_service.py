"""
Folder service for Skyfish.

Lists folders (through the per-user cache), rebuilds the folder hierarchy
from the flat listing, and renders folder path labels.
"""

from collections import defaultdict
from collections.abc import Collection, Iterable
from operator import attrgetter

import structlog

from skyfish.api.endpoints.folders import get_folders
from skyfish.api.http_client import AsyncHttpClient
from skyfish.core.cache import CacheBackend
from skyfish.exceptions import FolderCycleError
from skyfish.models.folder import Folder, FolderNode

logger = structlog.get_logger(__name__)

PATH_SEPARATOR = " | "
ALL_FOLDERS_LABEL = "-- All folders --"
SHOW_ALL_FOLDERS_LABEL = "-- Show all folders --"
OPTION_DEPTH = 3


def build_folder_tree(folders: Iterable[Folder]) -> list[FolderNode]:
    """
    Arrange a flat folder listing into trees.

    Every folder appears exactly once: as a root if it has no parent (or its
    parent is not in the listing), otherwise under its parent. Roots keep
    their listing order; children are ordered by name, ties in listing order.
    Each node's ``descendant_ids`` holds its own ID and all IDs below it.

    Args:
        folders: Flat listing; duplicate IDs keep the first record.

    Returns:
        Root nodes.

    Raises:
        FolderCycleError: If parent references form a cycle.
    """
    by_id: dict[int, Folder] = {}
    for folder in folders:
        by_id.setdefault(folder.folder_id, folder)

    children_of: dict[int, list[int]] = defaultdict(list)
    root_ids: list[int] = []
    for folder in by_id.values():
        if folder.parent_id is None:
            root_ids.append(folder.folder_id)
        elif folder.parent_id not in by_id:
            logger.warning(
                "Parent folder not listed, treating as top level",
                folder_id=folder.folder_id,
                parent_id=folder.parent_id,
            )
            root_ids.append(folder.folder_id)
        else:
            children_of[folder.parent_id].append(folder.folder_id)

    built: dict[int, FolderNode] = {}
    for root_id in root_ids:
        # Post-order: a node is built once all of its children are
        stack = [(root_id, False)]
        while stack:
            folder_id, expanded = stack.pop()
            child_ids = children_of.get(folder_id, ())
            if not expanded:
                stack.append((folder_id, True))
                stack.extend((child_id, False) for child_id in child_ids)
                continue

            folder = by_id[folder_id]
            children = tuple(sorted((built[c] for c in child_ids), key=attrgetter("name")))
            built[folder_id] = FolderNode(
                folder_id=folder_id,
                name=folder.name,
                parent_id=folder.parent_id,
                children=children,
                descendant_ids=frozenset({folder_id}).union(
                    *(child.descendant_ids for child in children)
                ),
            )

    if unreached := tuple(folder_id for folder_id in by_id if folder_id not in built):
        msg = "Folder parent references form a cycle"
        raise FolderCycleError(msg, folder_ids=unreached)

    return [built[root_id] for root_id in root_ids]


def path_names(
    folders: Iterable[Folder],
    folder_ids: Iterable[int],
    root_folder_id: int = 0,
) -> list[str]:
    """
    Render ``"Grandparent | Parent | Self"`` labels for folder IDs.

    Args:
        folders: Flat folder listing.
        folder_ids: Folders to label, typically an item's ``folder_ids``.
        root_folder_id: Top-level folder the caller is scoped to, 0 for none.
            When set, folders under another top-level folder are skipped and
            the top-level name is left out of the label, except for the scope
            root itself, which is labelled with its own name.

    Returns:
        Labels in the order of ``folder_ids``. Unknown IDs are skipped.

    Raises:
        FolderCycleError: If walking up from a folder never reaches a top level.
    """
    by_id = {folder.folder_id: folder for folder in folders}
    labels = []
    for folder_id in folder_ids:
        folder = by_id.get(folder_id)
        if folder is None:
            logger.debug("Unknown folder in path lookup", folder_id=folder_id)
            continue

        names = [folder.name]
        seen = {folder.folder_id}
        while (parent := by_id.get(folder.parent_id)) is not None:
            if parent.folder_id in seen:
                msg = "Folder parent references form a cycle"
                raise FolderCycleError(msg, folder_ids=tuple(seen))
            seen.add(parent.folder_id)
            names.append(parent.name)
            folder = parent

        if root_folder_id:
            if folder.folder_id != root_folder_id:
                continue
            # The scope root itself keeps its own name
            if len(names) > 1:
                names.pop()

        labels.append(PATH_SEPARATOR.join(reversed(names)))
    return labels


def folder_options(
    roots: Iterable[FolderNode],
    root_folder_id: int = 0,
    omit_folder_ids: Collection[int] = (),
    depth: int = OPTION_DEPTH,
) -> list[tuple[int | str, str]]:
    """
    Flatten the top levels of the tree into ``(id, label)`` choices.

    With ``root_folder_id`` set (and present), the choices cover that folder's
    children and the first choice selects the root itself. Otherwise the first
    choice is ``("", ALL_FOLDERS_LABEL)``. Top-level folders listed in
    ``omit_folder_ids`` are left out along with their subtrees.
    """
    roots = list(roots)
    root = None
    if root_folder_id:
        root = next((r for r in roots if r.folder_id == root_folder_id), None)

    options: list[tuple[int | str, str]]
    if root is not None:
        options = [(root.folder_id, ALL_FOLDERS_LABEL)]
        top = root.children
    else:
        options = [("", ALL_FOLDERS_LABEL)]
        top = roots

    for node in top:
        if node.folder_id in omit_folder_ids:
            continue
        _append_options(options, node, (), depth)
    return options


def top_level_options(roots: Iterable[FolderNode]) -> list[tuple[int, str]]:
    """Choices for picking a top-level folder; 0 means all folders."""
    return [(0, SHOW_ALL_FOLDERS_LABEL), *((r.folder_id, r.name) for r in roots)]


def _append_options(
    options: list[tuple[int | str, str]],
    node: FolderNode,
    prefix: tuple[str, ...],
    remaining: int,
) -> None:
    if remaining <= 0:
        return
    names = (*prefix, node.name)
    options.append((node.folder_id, PATH_SEPARATOR.join(names)))
    for child in node.children:
        _append_options(options, child, names, remaining - 1)


class FolderService:
    """
    Folder listing with a per-user cache.

    Cached listings are keyed by the principal, so users whose accounts see
    different folders never share entries.
    """

    def __init__(
        self,
        http: AsyncHttpClient,
        cache: CacheBackend,
        *,
        principal_id: str | int,
        ttl_minutes: int,
    ) -> None:
        """
        Args:
            http: Async HTTP client.
            cache: Cache store for listings.
            principal_id: Identity of the calling user.
            ttl_minutes: Lifetime of cached listings; 0 disables caching.
        """
        self._http = http
        self._cache = cache
        self._principal_id = principal_id
        self._ttl_seconds = max(ttl_minutes, 0) * 60

    @property
    def cache_key(self) -> str:
        return f"folders_{self._principal_id}"

    async def get_folders(self) -> list[Folder]:
        """
        List folders, from cache when a non-empty listing is cached.

        Fresh non-empty listings are stored for the configured TTL; with a TTL
        of 0 they expire at once.

        Raises:
            SkyfishError: If the listing cannot be fetched.
        """
        if cached := self._cache.get(self.cache_key):
            logger.debug("Folder listing served from cache", key=self.cache_key)
            return list(cached)

        folders = await self.get_folders_without_cache()
        if folders:
            self._cache.set(self.cache_key, tuple(folders), self._ttl_seconds)
        return folders

    async def get_folders_without_cache(self) -> list[Folder]:
        """List folders straight from the API."""
        return await get_folders(self._http)

    async def build_tree(self) -> list[FolderNode]:
        """
        Build the folder hierarchy for the current user.

        Raises:
            SkyfishError: If the listing cannot be fetched.
            FolderCycleError: If parent references form a cycle.
        """
        return build_folder_tree(await self.get_folders())

    async def path_names(self, folder_ids: Iterable[int], root_folder_id: int = 0) -> list[str]:
        """Folder path labels for the given IDs; see ``path_names``."""
        return path_names(await self.get_folders(), folder_ids, root_folder_id)

    def invalidate(self) -> None:
        """Drop the cached listing for the current user."""
        self._cache.delete(self.cache_key)
