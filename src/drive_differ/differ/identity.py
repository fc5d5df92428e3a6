"""Identity keys used to match nodes across the old and the new tree."""

from __future__ import annotations

from collections.abc import Callable

from drive_differ.differ.models import Node, NodeRef

KEY_SEPARATOR = "/"

Selector = Callable[[Node | NodeRef], str]


def by_id(ref: Node | NodeRef) -> str:
    return ref.id


def by_name(ref: Node | NodeRef) -> str:
    return ref.name


SELECTORS: dict[str, Selector] = {
    "id": by_id,
    "name": by_name,
}


def resolve_selector(selector: str | Selector) -> Selector:
    """Turn a selector name or callable into a key-extraction function.

    Args:
        selector: "id", "name", or a callable taking a Node or NodeRef.

    Returns:
        The key-extraction function.

    Raises:
        ValueError: If a string selector is not one of the known names.
    """
    if callable(selector):
        return selector
    try:
        return SELECTORS[selector]
    except KeyError:
        raise ValueError(
            f"Unknown identity selector {selector!r}; expected one of {sorted(SELECTORS)}"
        ) from None


def identity_key(node: Node, selector: Selector, root_depth: int = 0) -> str:
    """Join the selected field of every ancestor and of the node itself.

    Two nodes with equal keys are treated as the same entity, whichever tree
    they came from. Changing the selected field changes the key.

    Args:
        node: The node to key.
        selector: Key-extraction function applied to each chain entry.
        root_depth: Number of leading ancestors to leave out. Passing the
            depth of the compared root's children keys nodes relative to
            that root, so two differently named roots still line up.

    Returns:
        The identity key.
    """
    parts = [selector(a) for a in node.ancestors[root_depth:]]
    parts.append(selector(node))
    return KEY_SEPARATOR.join(parts)
