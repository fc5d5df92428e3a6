"""Unit tests for differ/identity.py — selectors and identity keys."""

import pytest

from drive_differ.differ.identity import by_id, by_name, identity_key, resolve_selector
from drive_differ.differ.models import Node, NodeKind, NodeRef


def _node(ancestors: tuple[NodeRef, ...] = ()) -> Node:
    return Node(id="e01", name="E01.mkv", parent_id="s01", kind=NodeKind.FILE, ancestors=ancestors)


class TestResolveSelector:
    def test_id_and_name_are_known(self) -> None:
        assert resolve_selector("id") is by_id
        assert resolve_selector("name") is by_name

    def test_callable_is_returned_unchanged(self) -> None:
        def selector(ref: Node | NodeRef) -> str:
            return ref.name.lower()

        assert resolve_selector(selector) is selector

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown identity selector 'hash'"):
            resolve_selector("hash")


class TestIdentityKey:
    def test_joins_ancestor_chain_and_node_by_id(self) -> None:
        node = _node((NodeRef("tv", "TV"), NodeRef("s01", "S01")))
        assert identity_key(node, by_id) == "tv/s01/e01"

    def test_joins_ancestor_chain_and_node_by_name(self) -> None:
        node = _node((NodeRef("tv", "TV"), NodeRef("s01", "S01")))
        assert identity_key(node, by_name) == "TV/S01/E01.mkv"

    def test_node_without_ancestors_uses_own_field(self) -> None:
        assert identity_key(_node(), by_id) == "e01"

    def test_same_name_in_different_folders_gives_different_keys(self) -> None:
        a = _node((NodeRef("s01", "S01"),))
        b = _node((NodeRef("s02", "S02"),))
        assert identity_key(a, by_name) != identity_key(b, by_name)

    def test_root_depth_leaves_out_leading_ancestors(self) -> None:
        node = _node((NodeRef("tv-2024", "TV-2024"), NodeRef("s01", "S01")))
        assert identity_key(node, by_name, root_depth=1) == "S01/E01.mkv"

    def test_root_depth_makes_keys_independent_of_root_name(self) -> None:
        a = _node((NodeRef("tv-2024", "TV-2024"), NodeRef("s01", "S01")))
        b = _node((NodeRef("tv-2025", "TV-2025"), NodeRef("s01", "S01")))
        assert identity_key(a, by_id, root_depth=1) == identity_key(b, by_id, root_depth=1)
