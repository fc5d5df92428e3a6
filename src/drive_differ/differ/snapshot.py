"""Paged folders over a nested snapshot tree loaded from a dict or JSON file.

A snapshot tree looks like::

    {
        "file_id": "tv",
        "name": "tv",
        "type": "folder",
        "items": [
            {"file_id": "s01", "name": "S01", "items": [
                {"file_id": "e01", "name": "E01.mkv"}
            ]}
        ]
    }

``type`` may be omitted: entries with ``items`` are folders, others files.
``parent_file_id`` defaults to the id of the enclosing folder.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from drive_differ.differ.models import Node, NodeKind, NodeRef
from drive_differ.differ.paging import ListingError, PagedFolder

# Snapshot JSON field names
FIELD_ID = "file_id"
FIELD_NAME = "name"
FIELD_PARENT_ID = "parent_file_id"
FIELD_TYPE = "type"
FIELD_ITEMS = "items"

DEFAULT_PAGE_SIZE = 20


class SnapshotFolder(PagedFolder):
    """A PagedFolder serving one folder of an in-memory snapshot tree."""

    def __init__(
        self,
        node: Node,
        index: dict[str, list[dict[str, Any]]],
        page_size: int = DEFAULT_PAGE_SIZE,
        fail_on: Mapping[str, int] | None = None,
    ) -> None:
        """Initialise the pager.

        Args:
            node: The folder being listed.
            index: Raw children of every folder in the tree, keyed by folder id.
            page_size: Maximum number of children per page.
            fail_on: Folder id to the 1-based page call that raises
                ListingError instead of returning a page.

        Raises:
            ValueError: If page_size is smaller than 1.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.node = node
        self._index = index
        self._page_size = page_size
        self._fail_on: Mapping[str, int] = fail_on or {}
        self._children: list[Node] | None = None
        self._offset = 0
        self._calls = 0

    @classmethod
    def from_tree(
        cls,
        tree: dict[str, Any],
        page_size: int = DEFAULT_PAGE_SIZE,
        fail_on: Mapping[str, int] | Iterable[str] | None = None,
    ) -> SnapshotFolder:
        """Index a nested snapshot tree and return a pager over its root.

        Args:
            tree: The root folder entry.
            page_size: Maximum number of children per page.
            fail_on: Folder ids whose listing fails, either as a mapping to
                the failing page call or as plain ids (failing on the first call).

        Returns:
            SnapshotFolder bound to the root of the tree.
        """
        index: dict[str, list[dict[str, Any]]] = {}
        _index_tree(tree, index)
        root = _parse_entry(tree, parent_id=tree.get(FIELD_PARENT_ID, ""), ancestors=())
        if fail_on is not None and not isinstance(fail_on, Mapping):
            fail_on = {folder_id: 1 for folder_id in fail_on}
        return cls(root, index, page_size=page_size, fail_on=fail_on)

    @classmethod
    def from_json(cls, path: str | Path, page_size: int = DEFAULT_PAGE_SIZE) -> SnapshotFolder:
        """Load a snapshot tree from a JSON file."""
        with open(path, encoding="utf-8") as fh:
            tree = json.load(fh)
        return cls.from_tree(tree, page_size=page_size)

    async def next(self) -> list[Node]:
        self._calls += 1
        if self._fail_on.get(self.node.id) == self._calls:
            raise ListingError(self.node, f"snapshot listing failed on page call {self._calls}")
        if self._children is None:
            self._children = self._list_children()
        page = self._children[self._offset : self._offset + self._page_size]
        self._offset += len(page)
        return page

    def open(self, node: Node) -> SnapshotFolder:
        if node.id not in self._index:
            raise ValueError(f"{node.name!r} ({node.id}) is not a folder of this snapshot")
        return SnapshotFolder(node, self._index, page_size=self._page_size, fail_on=self._fail_on)

    def _list_children(self) -> list[Node]:
        ancestors = (*self.node.ancestors, self.node.ref)
        children = [
            _parse_entry(raw, parent_id=self.node.id, ancestors=ancestors)
            for raw in self._index[self.node.id]
        ]
        return sorted(children, key=lambda n: n.name, reverse=True)


def _index_tree(entry: dict[str, Any], index: dict[str, list[dict[str, Any]]]) -> None:
    items = entry.get(FIELD_ITEMS, [])
    index[entry[FIELD_ID]] = items
    for child in items:
        if _entry_kind(child) is NodeKind.FOLDER:
            _index_tree(child, index)


def _entry_kind(entry: dict[str, Any]) -> NodeKind:
    if FIELD_TYPE in entry:
        return NodeKind(entry[FIELD_TYPE])
    return NodeKind.FOLDER if FIELD_ITEMS in entry else NodeKind.FILE


def _parse_entry(
    entry: dict[str, Any], parent_id: str, ancestors: tuple[NodeRef, ...]
) -> Node:
    return Node(
        id=entry[FIELD_ID],
        name=entry[FIELD_NAME],
        parent_id=entry.get(FIELD_PARENT_ID, parent_id),
        kind=_entry_kind(entry),
        ancestors=ancestors,
    )
