"""Ancestor folder materialization.

Folder-aware destinations need every folder that contains an accepted
item, even when that folder failed its own filter test. The materializer
consumes (item, verdict) pairs in any arrival order and emits decision
records, synthesizing ``ancestor_of_match`` folder records the first
time a descendant is accepted. Each folder is emitted as accepted at
most once per pass.

Folders whose whole subtree is rejected (excluded by path, out of
scope or too deep) are never synthesized. A folder rejected only by its
own basename or by the includes is revived when a descendant is
accepted. A synthesized folder that would pass the filters on its own
is reported as ``self_matched``, so the reason does not depend on
whether the folder or its descendant arrived first. The source root is
never synthesized; it is only emitted when it matches on its own.
"""

import logging
import threading
from enum import Enum

from xferfilter.core.errors import EngineCancelledError, EngineStateError
from xferfilter.filters.categories import OperationKind
from xferfilter.filters.filter_set import FilterSet
from xferfilter.models.item import EnumeratedItem, PathSegments, join_path
from xferfilter.models.verdict import DecisionRecord, MatchReason, RejectReason, Verdict

logger = logging.getLogger(__name__)


class MaterializerState(str, Enum):
    """Lifecycle state of an ancestor materializer."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"
    FINALIZING = "finalizing"
    DONE = "done"
    CANCELLED = "cancelled"


class AncestorMaterializer:
    """Tracks emitted folders for one enumeration pass.

    Safe to feed from several threads; all state is guarded by a lock.

    Args:
        filter_set: Filter set used to decide which ancestors may be
            synthesized.
    """

    def __init__(self, filter_set: FilterSet) -> None:
        self._filter_set = filter_set
        self._enabled = filter_set.operation != OperationKind.REMOVE
        self._lock = threading.Lock()
        self._state = MaterializerState.IDLE
        # Folders already emitted as accepted (self-matched or synthesized)
        self._emitted: set[PathSegments] = set()
        # Rejected folders that an accepted descendant may still revive
        self._pending: dict[PathSegments, RejectReason] = {}

    @property
    def state(self) -> MaterializerState:
        return self._state

    @property
    def pending_count(self) -> int:
        """Number of rejected folders still waiting for a descendant."""
        with self._lock:
            return len(self._pending)

    def feed(self, item: EnumeratedItem, verdict: Verdict) -> list[DecisionRecord]:
        """Consume one decided item.

        Args:
            item: The enumerated item.
            verdict: Its verdict from the decision function.

        Returns:
            Records that can be emitted now: synthesized ancestors first
            (top-down), then the item itself when it is accepted or is a
            rejected file. Rejected folders are held back until finalize.

        Raises:
            EngineCancelledError: If the pass was cancelled.
            EngineStateError: If the pass was already finalized.
        """
        with self._lock:
            self._check_open()
            self._state = MaterializerState.ACCUMULATING

            if verdict.accepted:
                return self._accept(item)
            return self._reject(item, verdict.rejection)  # type: ignore[arg-type]

    def finalize(self) -> list[DecisionRecord]:
        """Close the pass and flush rejected folders nobody revived.

        Returns:
            Rejected folder records, sorted by path.

        Raises:
            EngineCancelledError: If the pass was cancelled.
            EngineStateError: If the pass was already finalized.
        """
        with self._lock:
            self._check_open()
            if self._state == MaterializerState.IDLE:
                self._state = MaterializerState.ACCUMULATING
            self._state = MaterializerState.FINALIZING

            records = [
                DecisionRecord(path=join_path(path), is_folder=True, accepted=False, reason=reason)
                for path, reason in sorted(self._pending.items())
            ]
            logger.debug(
                "Finalized pass: %d folder(s) emitted, %d folder(s) left rejected",
                len(self._emitted),
                len(records),
            )
            self._pending.clear()
            self._emitted.clear()
            self._state = MaterializerState.DONE
            return records

    def cancel(self) -> None:
        """Abort the pass and discard buffered folder state."""
        with self._lock:
            if self._state == MaterializerState.CANCELLED:
                return
            logger.debug(
                "Cancelling pass in state %s, discarding %d pending folder(s)",
                self._state.value,
                len(self._pending),
            )
            self._pending.clear()
            self._emitted.clear()
            self._state = MaterializerState.CANCELLED

    def _check_open(self) -> None:
        if self._state == MaterializerState.CANCELLED:
            msg = "Materializer pass was cancelled"
            raise EngineCancelledError(msg)
        if self._state in (MaterializerState.FINALIZING, MaterializerState.DONE):
            msg = f"Materializer pass already {self._state.value}"
            raise EngineStateError(msg)

    def _accept(self, item: EnumeratedItem) -> list[DecisionRecord]:
        records = self._materialize_ancestors(item) if self._enabled else []

        if item.is_folder:
            if item.relative_path in self._emitted:
                return records
            self._emitted.add(item.relative_path)
            self._pending.pop(item.relative_path, None)

        records.append(
            DecisionRecord(
                path=item.path,
                is_folder=item.is_folder,
                accepted=True,
                reason=MatchReason.SELF_MATCHED,
            )
        )
        return records

    def _reject(self, item: EnumeratedItem, rejection: RejectReason) -> list[DecisionRecord]:
        if item.is_folder:
            if item.relative_path in self._emitted:
                # Already synthesized for an earlier descendant
                return []
            if self._enabled and not rejection.is_unconditional:
                self._pending[item.relative_path] = rejection
                return []

        return [
            DecisionRecord(
                path=item.path,
                is_folder=item.is_folder,
                accepted=False,
                reason=rejection,
            )
        ]

    def _materialize_ancestors(self, item: EnumeratedItem) -> list[DecisionRecord]:
        """Synthesize not-yet-emitted ancestors of an accepted item.

        Walks bottom-up and stops at the first ancestor already emitted,
        since everything above it was handled when it was emitted.
        """
        missing: list[PathSegments] = []
        for ancestor in reversed(list(item.ancestors())):
            if ancestor in self._emitted:
                break
            if self._filter_set.rejects_unconditionally(ancestor):
                continue
            missing.append(ancestor)

        records: list[DecisionRecord] = []
        for ancestor in reversed(missing):
            self._emitted.add(ancestor)
            self._pending.pop(ancestor, None)
            records.append(
                DecisionRecord(
                    path=join_path(ancestor),
                    is_folder=True,
                    accepted=True,
                    reason=self._ancestor_reason(ancestor),
                )
            )
        return records

    def _ancestor_reason(self, ancestor: PathSegments) -> MatchReason:
        # Time-based includes need the folder's own item, which may not have arrived yet
        verdict = self._filter_set.decide_path(ancestor)
        if verdict is not None and verdict.accepted:
            return MatchReason.SELF_MATCHED
        return MatchReason.ANCESTOR_OF_MATCH
