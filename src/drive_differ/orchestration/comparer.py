"""Folder comparer — wires Graph-backed folders into a root FolderDiffer."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from typing import TYPE_CHECKING

from drive_differ.differ.folder_differ import FolderDiffer, NodeFilter
from drive_differ.differ.identity import Selector
from drive_differ.differ.models import DiffResult, EffectKind, Node
from drive_differ.differ.observer import DiffObserver
from drive_differ.graph.client import GraphClient, graph_client_from_config
from drive_differ.graph.folder import DEFAULT_PAGE_SIZE, GraphFolder

if TYPE_CHECKING:
    from drive_differ.config import AppConfig

logger = logging.getLogger(__name__)


def extension_filter(extensions: Iterable[str]) -> NodeFilter | None:
    """Build an inclusion filter that keeps folders and files with listed extensions.

    Args:
        extensions: Lower-cased extensions including the dot, e.g. ".mkv".

    Returns:
        The filter, or None when no extensions are given (every item included).
    """
    allowed = frozenset(extensions)
    if not allowed:
        return None

    def include(node: Node) -> bool:
        if node.is_folder:
            return True
        return os.path.splitext(node.name)[1].lower() in allowed

    return include


class FolderComparer:
    """Compares two OneDrive folders of the drive its GraphClient reads."""

    def __init__(
        self,
        graph_client: GraphClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        identity_selector: str | Selector = "name",
        include_extensions: Iterable[str] = (),
        observer: DiffObserver | None = None,
    ) -> None:
        """Initialise the comparer.

        Args:
            graph_client: GraphClient bound to the drive holding both folders.
            page_size: Children requested per listing page.
            identity_selector: "id", "name", or a key-extraction callable.
            include_extensions: File extensions taking part in the diff; empty
                means every file.
            observer: Progress observer handed to the differ.
        """
        self._graph = graph_client
        self._page_size = page_size
        self._identity_selector = identity_selector
        self._filter = extension_filter(include_extensions)
        self._observer = observer

    async def open_folder(self, item_id: str) -> GraphFolder:
        return await GraphFolder.from_item_id(self._graph, item_id, page_size=self._page_size)

    async def compare(self, old_folder_id: str, new_folder_id: str) -> DiffResult:
        """Diff the folder ``new_folder_id`` against ``old_folder_id``.

        Args:
            old_folder_id: Item ID of the reference folder.
            new_folder_id: Item ID of the current folder.

        Returns:
            The root DiffResult. Labels in ``aborted`` name sub-trees whose
            listing failed; changes below them are unknown.

        Raises:
            ListingError: If either root folder cannot be resolved.
        """
        logger.info(
            "[compare] starting folder diff; old_folder_id:%s;new_folder_id:%s",
            old_folder_id,
            new_folder_id,
        )
        old_folder = await self.open_folder(old_folder_id)
        new_folder = await self.open_folder(new_folder_id)
        differ = FolderDiffer(
            new_folder,
            old_folder,
            identity_selector=self._identity_selector,
            filter=self._filter,
            observer=self._observer,
        )
        result = await differ.run()
        added = sum(1 for e in result.effects if e.kind is EffectKind.ADD)
        logger.info(
            "[compare] folder diff complete; state:%s;added:%d;deleted:%d;aborted:%d",
            differ.state.value,
            added,
            len(result.effects) - added,
            len(result.aborted),
        )
        for label in result.aborted:
            logger.warning("[compare] sub-tree not compared, changes unknown; folder:%s", label)
        return result


def folder_comparer_from_config(config: AppConfig) -> FolderComparer:
    """Construct a FolderComparer from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured FolderComparer instance.
    """
    return FolderComparer(
        graph_client=graph_client_from_config(config),
        page_size=config.page_size,
        identity_selector=config.identity_selector,
        include_extensions=config.include_extensions,
    )


def compare_folders(config: AppConfig) -> DiffResult:
    """Run a full diff of the configured folders on a fresh event loop."""
    comparer = folder_comparer_from_config(config)
    return asyncio.run(comparer.compare(config.old_folder_id, config.new_folder_id))
