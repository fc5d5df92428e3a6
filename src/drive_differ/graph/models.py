"""Microsoft Graph drive item fields and their mapping to snapshot nodes."""

from __future__ import annotations

from typing import Any

from drive_differ.differ.models import Node, NodeKind, NodeRef

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_FOLDER = "folder"
FIELD_PARENT_REFERENCE = "parentReference"

# OData response keys
ODATA_NEXT_LINK = "@odata.nextLink"
ODATA_VALUE = "value"


def parse_drive_item(raw: dict[str, Any], ancestors: tuple[NodeRef, ...] = ()) -> Node:
    """Map a raw Graph API drive item dict to a Node.

    Args:
        raw: Drive item as returned by /drive/items endpoints.
        ancestors: Ancestor chain of the item, root first.

    Returns:
        Node with kind FOLDER when the item carries a ``folder`` facet.
    """
    parent_ref = raw.get(FIELD_PARENT_REFERENCE, {})
    return Node(
        id=raw.get(FIELD_ID, ""),
        name=raw.get(FIELD_NAME, ""),
        parent_id=parent_ref.get(FIELD_ID, ""),
        kind=NodeKind.FOLDER if FIELD_FOLDER in raw else NodeKind.FILE,
        ancestors=ancestors,
    )
