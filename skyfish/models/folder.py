"""
Folder domain models.
"""

from dataclasses import dataclass
from typing import Any, Self


@dataclass(frozen=True, kw_only=True)
class Folder:
    """
    A folder record as listed by the API.

    Attributes:
        folder_id: Folder ID.
        name: Display name.
        parent_id: ID of the parent folder, or None for a top-level folder.
    """

    folder_id: int
    name: str
    parent_id: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Self:
        parent = data.get("parent")
        return cls(
            folder_id=int(data["id"]),
            name=str(data.get("name", "")),
            parent_id=int(parent) if parent else None,
        )


@dataclass(frozen=True, kw_only=True)
class FolderNode:
    """
    A folder placed in the reconstructed hierarchy.

    ``descendant_ids`` holds the folder's own ID plus the IDs of every folder
    below it. Children are ordered by name.
    """

    folder_id: int
    name: str
    parent_id: int | None = None
    children: tuple["FolderNode", ...] = ()
    descendant_ids: frozenset[int] = frozenset()

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def folder_ids_csv(self) -> str:
        """Comma-joined descendant IDs, usable as a search folder scope."""
        return ",".join(str(i) for i in sorted(self.descendant_ids))

    def get_child(self, name: str) -> Self | None:
        """Get a direct child by name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find(self, folder_id: int) -> Self | None:
        """Find a node by ID in this subtree."""
        if folder_id not in self.descendant_ids:
            return None
        for node, _ in self.walk():
            if node.folder_id == folder_id:
                return node
        return None

    def count_descendants(self) -> int:
        """Total number of folders below this one."""
        return len(self.descendant_ids) - 1

    def walk(self) -> "FolderNodeIterator":
        """
        Iterate over this node and all descendants, depth first.

        Yields:
            Tuple of (node, depth) for each node in the tree.
        """
        return FolderNodeIterator(self)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary representation."""
        result: dict[str, object] = {
            "id": self.folder_id,
            "name": self.name,
            "folder_ids": sorted(self.descendant_ids),
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def format_tree(self, indent: int = 0) -> str:
        """Format as an indented multi-line string."""
        lines = [f"{'  ' * indent}{self.name} [{self.folder_id}]"]
        for child in self.children:
            lines.append(child.format_tree(indent + 1))
        return "\n".join(lines)


class FolderNodeIterator:
    """Iterator for walking a FolderNode tree."""

    def __init__(self, root: FolderNode) -> None:
        self._stack: list[tuple[FolderNode, int]] = [(root, 0)]

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> tuple[FolderNode, int]:
        if not self._stack:
            raise StopIteration

        node, depth = self._stack.pop()

        # Reversed so children come out in name order
        for child in reversed(node.children):
            self._stack.append((child, depth + 1))

        return node, depth
