"""Paginated two-tree folder diffing."""

from drive_differ.differ.folder_differ import FolderDiffer, NodeFilter
from drive_differ.differ.identity import by_id, by_name, identity_key, resolve_selector
from drive_differ.differ.models import (
    DiffResult,
    DiffState,
    Effect,
    EffectKind,
    Node,
    NodeKind,
    NodeRef,
)
from drive_differ.differ.observer import DiffObserver, LoggingObserver
from drive_differ.differ.paging import ListingError, PagedFolder
from drive_differ.differ.snapshot import SnapshotFolder

__all__ = [
    "DiffObserver",
    "DiffResult",
    "DiffState",
    "Effect",
    "EffectKind",
    "FolderDiffer",
    "ListingError",
    "LoggingObserver",
    "Node",
    "NodeFilter",
    "NodeKind",
    "NodeRef",
    "PagedFolder",
    "SnapshotFolder",
    "by_id",
    "by_name",
    "identity_key",
    "resolve_selector",
]
