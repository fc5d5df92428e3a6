"""The paged folder listing contract consumed by FolderDiffer."""

from __future__ import annotations

import abc

from drive_differ.differ.models import Node


class ListingError(Exception):
    """Raised when a page of children cannot be fetched."""

    def __init__(self, folder: Node, message: str) -> None:
        super().__init__(f"Listing {folder.name!r} ({folder.id}) failed: {message}")
        self.folder = folder
        self.message = message


class PagedFolder(abc.ABC):
    """A handle to one folder in one snapshot, listed page by page.

    Implementations must return children sorted by name, descending, and
    must be stable across repeated listings of unchanged remote state.
    Retry, backoff and timeouts belong to the implementation.
    """

    node: Node

    @abc.abstractmethod
    async def next(self) -> list[Node]:
        """Return the next page of direct children.

        Returns:
            The next ordered page; an empty list exactly when the children
            are exhausted.

        Raises:
            ListingError: If the page cannot be fetched.
        """

    @abc.abstractmethod
    def open(self, node: Node) -> PagedFolder:
        """Return a fresh pager over the children of a folder in the same tree."""
