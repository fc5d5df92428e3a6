"""Data models for folder snapshots and the effects a diff produces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    """Whether a node is a plain file or a folder with children."""

    FILE = "file"
    FOLDER = "folder"


class EffectKind(str, Enum):
    """Kinds of change a diff can report.

    MOVE is reserved for cross-directory moves; FolderDiffer never emits it
    and reports a move as a DELETE plus an ADD.
    """

    ADD = "add"
    DELETE = "delete"
    MOVE = "move"


class DiffState(str, Enum):
    """Lifecycle of a single FolderDiffer instance."""

    PENDING = "pending"
    RECONCILING = "reconciling"
    EXHAUSTED = "exhausted"
    FINALIZED = "finalized"
    ABORTED = "aborted"


@dataclass(frozen=True)
class NodeRef:
    """One entry of an ancestor chain."""

    id: str
    name: str


@dataclass(frozen=True)
class Node:
    """A file or folder in one snapshot.

    Attributes:
        id: Stable remote identifier.
        name: Display name; listings are ordered by it, descending.
        parent_id: Identifier of the containing folder.
        kind: File or folder.
        ancestors: Ancestor chain, root first, direct parent last.
    """

    id: str
    name: str
    parent_id: str
    kind: NodeKind
    ancestors: tuple[NodeRef, ...] = ()

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def ref(self) -> NodeRef:
        return NodeRef(id=self.id, name=self.name)

    @property
    def ancestor_path(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.ancestors)


@dataclass(frozen=True)
class Effect:
    """A committed change detected between the old and the new tree."""

    kind: EffectKind
    node_id: str
    name: str
    node_kind: NodeKind
    ancestor_path: tuple[str, ...]
    parent_id: str = ""

    @classmethod
    def from_node(cls, kind: EffectKind, node: Node) -> Effect:
        return cls(
            kind=kind,
            node_id=node.id,
            name=node.name,
            node_kind=node.kind,
            ancestor_path=node.ancestor_path,
            parent_id=node.parent_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible values for downstream consumers."""
        return {
            "kind": self.kind.value,
            "node_id": self.node_id,
            "name": self.name,
            "node_kind": self.node_kind.value,
            "ancestor_path": list(self.ancestor_path),
            "parent_id": self.parent_id,
        }


@dataclass
class DiffResult:
    """What a FolderDiffer hands back when its run resolves.

    A child differ's result is merged into its parent. Only the root turns
    the provisional maps into effects, so for a finalized root both maps are
    empty and ``effects`` holds the complete change set.

    Attributes:
        maybe_adding: Provisional adds keyed by identity key, discovery order.
        maybe_deleting: Provisional deletes keyed by identity key.
        effects: Committed effects.
        aborted: Labels of sub-trees whose listing failed; their changes are
            unknown, not absent.
    """

    maybe_adding: dict[str, Node] = field(default_factory=dict)
    maybe_deleting: dict[str, Node] = field(default_factory=dict)
    effects: list[Effect] = field(default_factory=list)
    aborted: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.aborted
