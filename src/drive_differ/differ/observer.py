"""Observation hooks invoked by FolderDiffer at round boundaries."""

from __future__ import annotations

import logging

from drive_differ.differ.models import DiffResult, DiffState, Effect
from drive_differ.differ.paging import ListingError

logger = logging.getLogger(__name__)


class DiffObserver:
    """Receives progress notifications from a FolderDiffer.

    Every hook is a no-op here; subclass and override what you need. Hooks
    must not raise, and they cannot influence the diff.
    """

    def round_started(self, label: str, round_number: int) -> None:
        pass

    def provisional_updated(self, label: str, adding: int, deleting: int) -> None:
        pass

    def child_merged(self, label: str, child_label: str, result: DiffResult) -> None:
        pass

    def effect_committed(self, label: str, effect: Effect) -> None:
        pass

    def listing_failed(self, label: str, error: ListingError) -> None:
        pass

    def finished(self, label: str, state: DiffState, result: DiffResult) -> None:
        pass


class LoggingObserver(DiffObserver):
    """Writes every hook to the module logger."""

    def round_started(self, label: str, round_number: int) -> None:
        logger.debug("[round_started] fetching pages; folder:%s;round:%d", label, round_number)

    def provisional_updated(self, label: str, adding: int, deleting: int) -> None:
        logger.debug(
            "[provisional_updated] provisional sets; folder:%s;maybe_adding:%d;maybe_deleting:%d",
            label,
            adding,
            deleting,
        )

    def child_merged(self, label: str, child_label: str, result: DiffResult) -> None:
        logger.info(
            "[child_merged] merged sub-folder; "
            "folder:%s;child:%s;maybe_adding:%d;maybe_deleting:%d",
            label,
            child_label,
            len(result.maybe_adding),
            len(result.maybe_deleting),
        )

    def effect_committed(self, label: str, effect: Effect) -> None:
        logger.info(
            "[effect_committed] %s; folder:%s;name:%s;path:%s",
            effect.kind.value,
            label,
            effect.name,
            "/".join(effect.ancestor_path),
        )

    def listing_failed(self, label: str, error: ListingError) -> None:
        logger.warning(
            "[listing_failed] aborting sub-tree, its changes are dropped; folder:%s;error:%s",
            label,
            error,
        )

    def finished(self, label: str, state: DiffState, result: DiffResult) -> None:
        logger.info(
            "[finished] diff resolved; folder:%s;state:%s;effects:%d;aborted:%d",
            label,
            state.value,
            len(result.effects),
            len(result.aborted),
        )
