"""Diff two independently paginated folder trees into add/delete effects."""

from __future__ import annotations

from collections.abc import Callable

from drive_differ.differ.identity import Selector, identity_key, resolve_selector
from drive_differ.differ.models import DiffResult, DiffState, Effect, EffectKind, Node
from drive_differ.differ.observer import DiffObserver, LoggingObserver
from drive_differ.differ.paging import ListingError, PagedFolder

NodeFilter = Callable[[Node], bool]


class FolderDiffer:
    """Compares one (new, old) folder pair page by page.

    Both listings arrive ordered by name, descending, in bounded pages, so an
    insertion or deletion early in the sort order shifts every later page
    boundary. Items that cannot be matched yet are held in two provisional
    maps, keyed by identity key, until the other side's pagination catches
    up. Matched sub-folder pairs are diffed by a child FolderDiffer whose
    provisional maps are merged back into this one. Only the root differ
    turns what is left into effects, once both of its listings are
    exhausted.
    """

    def __init__(
        self,
        new_folder: PagedFolder,
        old_folder: PagedFolder,
        identity_selector: str | Selector = "id",
        filter: NodeFilter | None = None,
        observer: DiffObserver | None = None,
        *,
        is_root: bool = True,
        label: str = "",
        root_depths: tuple[int, int] | None = None,
    ) -> None:
        """Bind the differ to a folder pair.

        Args:
            new_folder: The folder in the current tree.
            old_folder: The same folder in the reference tree.
            identity_selector: "id", "name", or a key-extraction callable
                used to build identity keys.
            filter: Optional predicate selecting which children take part
                in the diff. Exhaustion is still decided on unfiltered pages.
            observer: Receives progress notifications; defaults to a
                LoggingObserver.
            is_root: False for differs spawned on matched sub-folders.
            label: Name used in notifications; derived from the folder names
                when empty.
            root_depths: Ancestor depth of the compared roots' children on the
                (new, old) side, left out of identity keys. Child differs
                inherit it; when omitted it is taken from the two folders,
                so differently named roots still match.
        """
        self.new_folder = new_folder
        self.old_folder = old_folder
        self.is_root = is_root
        self.label = label or f"[{old_folder.node.name}|{new_folder.node.name}]"
        self.state = DiffState.PENDING
        self.round = 0
        self.maybe_adding: dict[str, Node] = {}
        self.maybe_deleting: dict[str, Node] = {}
        self.effects: list[Effect] = []
        self.aborted: list[str] = []
        self._selector = resolve_selector(identity_selector)
        if root_depths is None:
            root_depths = (
                len(new_folder.node.ancestors) + 1,
                len(old_folder.node.ancestors) + 1,
            )
        self._new_depth, self._old_depth = root_depths
        self._filter = filter
        self._observer = observer if observer is not None else LoggingObserver()

    async def run(self) -> DiffResult:
        """Run the comparison until both listings are exhausted or one fails.

        A ListingError on either side aborts this differ: its provisional
        state is dropped and the returned result only names the aborted
        folder. The failure stops at this folder. Ancestor differs record the
        label in their own ``aborted`` list and keep listing their remaining
        pages. Other exceptions propagate.

        Returns:
            The provisional maps, effects and aborted labels of this differ.

        Raises:
            RuntimeError: If the differ has already been run.
        """
        if self.state is not DiffState.PENDING:
            raise RuntimeError(
                f"FolderDiffer {self.label} has already run; state:{self.state.value}"
            )
        self.state = DiffState.RECONCILING
        try:
            while not await self._reconcile_round():
                pass
        except ListingError as exc:
            self._abort(exc)
        result = self.result()
        self._observer.finished(self.label, self.state, result)
        return result

    def result(self) -> DiffResult:
        return DiffResult(
            maybe_adding=dict(self.maybe_adding),
            maybe_deleting=dict(self.maybe_deleting),
            effects=list(self.effects),
            aborted=list(self.aborted),
        )

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    async def _reconcile_round(self) -> bool:
        """Fetch one page per side and reconcile it; True once exhausted."""
        self.round += 1
        self._observer.round_started(self.label, self.round)
        # New side first, then old side; never concurrently.
        new_page = await self.new_folder.next()
        old_page = await self.old_folder.next()

        if not new_page and not old_page:
            self._exhaust()
            return True

        new_items = self._included(new_page)
        old_items = self._included(old_page)
        if new_items and not old_items:
            cancelled = self._hold(
                new_items, self._new_depth, self.maybe_adding, self.maybe_deleting
            )
            for new_node, old_node in cancelled:
                await self._descend(new_node, old_node)
        elif old_items and not new_items:
            cancelled = self._hold(
                old_items, self._old_depth, self.maybe_deleting, self.maybe_adding
            )
            for old_node, new_node in cancelled:
                await self._descend(new_node, old_node)
        else:
            await self._compare(new_items, old_items)
        self._observer.provisional_updated(
            self.label, len(self.maybe_adding), len(self.maybe_deleting)
        )
        return False

    def _hold(
        self,
        items: list[Node],
        depth: int,
        target: dict[str, Node],
        opposite: dict[str, Node],
    ) -> list[tuple[Node, Node]]:
        """Park one side's page as provisional, cancelling keys seen on the other side.

        A key already parked on the opposite side means the item exists in
        both trees and only its page window shifted.

        Returns:
            (item, counterpart) pairs that cancelled each other.
        """
        candidates = {self._key(node, depth): node for node in items}
        cancelled: list[tuple[Node, Node]] = []
        for key in list(candidates):
            if key in opposite:
                cancelled.append((candidates.pop(key), opposite.pop(key)))
        target.update(candidates)
        return cancelled

    async def _compare(self, new_items: list[Node], old_items: list[Node]) -> None:
        """Reconcile two non-empty pages together with everything carried over."""
        new_items = [*self.maybe_adding.values(), *new_items]
        old_items = [*self.maybe_deleting.values(), *old_items]
        self.maybe_adding = {}
        self.maybe_deleting = {}

        i = 0
        while i < len(old_items) and i < len(new_items):
            new_node, old_node = new_items[i], old_items[i]
            if self._new_key(new_node) != self._old_key(old_node):
                break
            await self._descend(new_node, old_node)
            i += 1

        remaining = {self._old_key(node): node for node in old_items[i:]}
        for new_node in new_items[i:]:
            key = self._new_key(new_node)
            counterpart = remaining.pop(key, None)
            if counterpart is None:
                self.maybe_adding[key] = new_node
                continue
            await self._descend(new_node, counterpart)
            self.maybe_adding.pop(key, None)
        self.maybe_deleting.update(remaining)

    async def _descend(self, new_node: Node, old_node: Node) -> None:
        """Diff a matched pair of sub-folders and merge the child's result."""
        if not (new_node.is_folder and old_node.is_folder):
            return
        child = FolderDiffer(
            self.new_folder.open(new_node),
            self.old_folder.open(old_node),
            identity_selector=self._selector,
            filter=self._filter,
            observer=self._observer,
            is_root=False,
            label=f"{self.label}[{old_node.name}|{new_node.name}]",
            root_depths=(self._new_depth, self._old_depth),
        )
        result = await child.run()
        self.aborted.extend(result.aborted)
        if child.state is DiffState.ABORTED:
            return
        self.maybe_adding.update(result.maybe_adding)
        self.maybe_deleting.update(result.maybe_deleting)
        self.effects.extend(result.effects)
        self._observer.child_merged(self.label, child.label, result)

    # ------------------------------------------------------------------
    # Terminal states
    # ------------------------------------------------------------------

    def _exhaust(self) -> None:
        if not self.is_root:
            self.state = DiffState.EXHAUSTED
            return
        for node in self.maybe_deleting.values():
            self._commit(EffectKind.DELETE, node)
        for node in self.maybe_adding.values():
            self._commit(EffectKind.ADD, node)
        self.maybe_deleting = {}
        self.maybe_adding = {}
        self.state = DiffState.FINALIZED

    def _commit(self, kind: EffectKind, node: Node) -> None:
        effect = Effect.from_node(kind, node)
        self.effects.append(effect)
        self._observer.effect_committed(self.label, effect)

    def _abort(self, error: ListingError) -> None:
        # Results of this sub-tree are unknown, so nothing accumulated here is kept.
        self.maybe_adding = {}
        self.maybe_deleting = {}
        self.effects = []
        self.aborted.append(self.label)
        self.state = DiffState.ABORTED
        self._observer.listing_failed(self.label, error)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _key(self, node: Node, depth: int) -> str:
        return identity_key(node, self._selector, root_depth=depth)

    def _new_key(self, node: Node) -> str:
        return self._key(node, self._new_depth)

    def _old_key(self, node: Node) -> str:
        return self._key(node, self._old_depth)

    def _included(self, page: list[Node]) -> list[Node]:
        if self._filter is None:
            return list(page)
        return [node for node in page if self._filter(node)]
