"""Partition-candidate resolution for containers holding several volumes.

A container may expose zero, one, or many addressable volumes. Containers
number their partitions inconsistently, so a single candidate is tried by
its user-facing ordinal and by its map index before falling back to
automatic detection and finally a bare open.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .engine import AUTO_PARTITION, PartitionSelector, VolumeEngine
from .errors import HFSNavError, InvalidArgumentError
from .runtime.dispatch import OwnerThreadDispatcher
from .session import VolumeSession
from .volume_model.types import HFS_PARTITION_TYPE, PartitionCandidate, PartitionMapEntry

logger = logging.getLogger(__name__)

PartitionChooser = Callable[[list[PartitionCandidate]], PartitionCandidate | None]

FALLBACK_SELECTORS: tuple[PartitionSelector, ...] = (AUTO_PARTITION, None)


def candidates_from_map(entries: Iterable[PartitionMapEntry]) -> list[PartitionCandidate]:
    """Keep HFS partitions in map order and number them from 1."""
    candidates: list[PartitionCandidate] = []
    for entry in entries:
        if entry.partition_type != HFS_PARTITION_TYPE:
            continue
        candidates.append(
            PartitionCandidate(
                ordinal=len(candidates) + 1,
                map_index=entry.map_index,
                name=entry.name,
            )
        )
    return candidates


def _dedupe(selectors: Iterable[PartitionSelector]) -> list[PartitionSelector]:
    ordered: list[PartitionSelector] = []
    for selector in selectors:
        if selector not in ordered:
            ordered.append(selector)
    return ordered


def open_attempts_for(
    candidates: list[PartitionCandidate],
    chosen: PartitionCandidate | None = None,
) -> list[PartitionSelector]:
    """Return the de-duplicated selector order to try for an open.

    An explicit ``chosen`` candidate is tried by ordinal then map index only.
    """
    if chosen is not None:
        return _dedupe((chosen.ordinal, chosen.map_index))
    if not candidates:
        return _dedupe(FALLBACK_SELECTORS)
    if len(candidates) == 1:
        only = candidates[0]
        return _dedupe((only.ordinal, only.map_index, *FALLBACK_SELECTORS))
    raise InvalidArgumentError(f"{len(candidates)} partitions found; a choice is required")


class PartitionResolver:
    """Enumerate candidates, obtain a choice when ambiguous, and open."""

    def __init__(
        self,
        engine: VolumeEngine,
        *,
        choose: PartitionChooser | None = None,
        dispatcher: OwnerThreadDispatcher | None = None,
    ) -> None:
        self._engine = engine
        self._choose = choose
        self._dispatcher = dispatcher

    def enumerate(self, path: Path) -> list[PartitionCandidate]:
        """List HFS candidates; enumeration failure yields an empty list."""
        try:
            entries = self._engine.list_partitions(path)
        except Exception:
            logger.warning("Partition enumeration failed for %s; using fallback order", path, exc_info=True)
            return []
        return candidates_from_map(entries)

    def _ask(self, candidates: list[PartitionCandidate]) -> PartitionCandidate | None:
        if self._choose is None:
            return None
        if self._dispatcher is not None:
            return self._dispatcher.call_sync(self._choose, list(candidates))
        return self._choose(list(candidates))

    def open(self, path: Path, *, writable: bool = True) -> VolumeSession | None:
        """Open the right volume in ``path``.

        Returns ``None`` when several candidates exist and no choice was
        made; nothing is opened in that case. Open failures propagate.
        """
        candidates = self.enumerate(path)
        chosen: PartitionCandidate | None = None
        if len(candidates) > 1:
            chosen = self._ask(candidates)
            if chosen is None:
                logger.info("Partition choice cancelled for %s", path)
                return None
            if chosen not in candidates:
                raise InvalidArgumentError(f"partition {chosen!r} is not a candidate of {path}")
        attempts = open_attempts_for(candidates, chosen)
        return self.open_first(path, attempts, writable=writable)

    def open_first(
        self,
        path: Path,
        attempts: list[PartitionSelector],
        *,
        writable: bool = True,
    ) -> VolumeSession:
        """Try ``attempts`` in order; first success wins, else last failure."""
        if not attempts:
            raise InvalidArgumentError(f"no partition candidates for {path}")
        last_error: HFSNavError | None = None
        for selector in attempts:
            try:
                return VolumeSession.open(self._engine, path, writable=writable, partition=selector)
            except HFSNavError as exc:
                logger.debug("Open of %s with partition %r failed: %s", path, selector, exc)
                last_error = exc
        assert last_error is not None
        raise last_error


__all__ = [
    "FALLBACK_SELECTORS",
    "PartitionChooser",
    "PartitionResolver",
    "candidates_from_map",
    "open_attempts_for",
]
