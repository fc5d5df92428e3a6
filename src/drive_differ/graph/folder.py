"""OneDrive folders listed page by page through Microsoft Graph."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any
from urllib.error import URLError

from drive_differ.differ.models import Node, NodeKind
from drive_differ.differ.paging import ListingError, PagedFolder
from drive_differ.graph.client import GraphApiError, GraphAuthError, GraphClient
from drive_differ.graph.models import ODATA_NEXT_LINK, ODATA_VALUE, parse_drive_item

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class GraphFolder(PagedFolder):
    """A PagedFolder over the children of one OneDrive folder.

    The first page comes from GraphClient.list_children; later pages follow
    ``@odata.nextLink`` until Graph stops returning one. Blocking HTTP calls
    run in a worker thread.
    """

    def __init__(
        self,
        graph_client: GraphClient,
        node: Node,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialise the pager.

        Args:
            graph_client: GraphClient bound to the drive that holds the folder.
            node: The folder being listed.
            page_size: Maximum number of children per page.
        """
        self.node = node
        self._graph = graph_client
        self._page_size = page_size
        self._next_link: str | None = None
        self._started = False

    @classmethod
    async def from_item_id(
        cls,
        graph_client: GraphClient,
        item_id: str,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> GraphFolder:
        """Resolve a folder by item ID and return a pager over it.

        The resolved folder becomes the root of its tree: its ancestor chain
        is empty.

        Raises:
            ListingError: If the item cannot be fetched or is not a folder.
        """
        placeholder = Node(id=item_id, name=item_id, parent_id="", kind=NodeKind.FOLDER)
        raw = await _call(placeholder, graph_client.get_item, item_id)
        node = parse_drive_item(raw)
        if not node.is_folder:
            raise ListingError(node, "item is not a folder")
        return cls(graph_client, node, page_size=page_size)

    async def next(self) -> list[Node]:
        ancestors = (*self.node.ancestors, self.node.ref)
        while self._has_more():
            if self._next_link is None:
                response = await _call(
                    self.node, self._graph.list_children, self.node.id, self._page_size
                )
                self._started = True
            else:
                response = await _call(self.node, self._graph.get_page, self._next_link)
            self._next_link = response.get(ODATA_NEXT_LINK)
            page = [parse_drive_item(raw, ancestors) for raw in response.get(ODATA_VALUE, [])]
            # An empty page is only an exhaustion signal when no further link exists.
            if page:
                return page
        return []

    def open(self, node: Node) -> GraphFolder:
        return GraphFolder(self._graph, node, page_size=self._page_size)

    def _has_more(self) -> bool:
        return not self._started or self._next_link is not None


async def _call(
    folder: Node, request: Callable[..., dict[str, Any]], *args: Any
) -> dict[str, Any]:
    try:
        return await asyncio.to_thread(request, *args)
    except (GraphApiError, GraphAuthError, URLError) as exc:
        logger.warning("[_call] listing request failed; folder:%s;error:%s", folder.name, exc)
        raise ListingError(folder, str(exc)) from exc
