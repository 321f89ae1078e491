"""Filter engine driving a full enumeration pass.

The engine decides every enumerated item (optionally on worker threads,
since decisions are pure) and feeds the verdicts, in input order, to a
single ancestor materializer. The resulting decision records form the
transfer plan handed to the scheduler.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import islice

from xferfilter.core.errors import EngineCancelledError
from xferfilter.filters.filter_set import FilterSet
from xferfilter.filters.materializer import AncestorMaterializer
from xferfilter.models.item import EnumeratedItem
from xferfilter.models.verdict import DecisionRecord, Verdict

logger = logging.getLogger(__name__)

# Items decided per worker before results are handed to the materializer
_BATCH_PER_WORKER = 64


class CancellationToken:
    """Cooperative cancellation flag shared between a job and its engine."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(slots=True)
class TransferPlan:
    """Decision records of one pass, grouped for the scheduler.

    Attributes:
        records: All records in emission order.
    """

    records: list[DecisionRecord] = field(default_factory=list)

    @property
    def folders_to_create(self) -> list[DecisionRecord]:
        return [r for r in self.records if r.is_folder_create]

    @property
    def files_to_transfer(self) -> list[DecisionRecord]:
        return [r for r in self.records if r.is_transfer]

    @property
    def rejected(self) -> list[DecisionRecord]:
        return [r for r in self.records if not r.accepted]

    @property
    def accepted_paths(self) -> set[str]:
        return {r.path for r in self.records if r.accepted}

    def summary(self) -> dict[str, int]:
        """Count records per category."""
        return {
            "folders": len(self.folders_to_create),
            "files": len(self.files_to_transfer),
            "rejected": len(self.rejected),
        }


class FilterEngine:
    """Runs a filter set over an item stream.

    Args:
        filter_set: Read-only filter set for the job.
    """

    def __init__(self, filter_set: FilterSet) -> None:
        self._filter_set = filter_set

    @property
    def filter_set(self) -> FilterSet:
        return self._filter_set

    def run(
        self,
        items: Iterable[EnumeratedItem],
        *,
        workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> Iterator[DecisionRecord]:
        """Evaluate every item and yield decision records.

        Args:
            items: Enumerated items, in any order.
            workers: Number of threads used for decisions. 1 decides
                inline.
            cancel: Optional token; once cancelled no further records
                are emitted.

        Yields:
            Decision records: accepted items and synthesized ancestors as
            they become known, rejected items, then the rejected folders
            left over at the end of the pass.

        Raises:
            EngineCancelledError: If the token is cancelled mid-pass.
            ValueError: If workers is less than 1.
        """
        if workers < 1:
            msg = f"workers must be at least 1, got {workers}"
            raise ValueError(msg)

        materializer = AncestorMaterializer(self._filter_set)
        decided = self._decide_all(items, workers)
        count = 0
        try:
            for item, verdict in decided:
                _raise_if_cancelled(cancel, materializer)
                count += 1
                yield from materializer.feed(item, verdict)
            _raise_if_cancelled(cancel, materializer)
            yield from materializer.finalize()
        except GeneratorExit:
            materializer.cancel()
            raise
        finally:
            decided.close()
        logger.debug("Evaluated %d item(s)", count)

    def plan(
        self,
        items: Iterable[EnumeratedItem],
        *,
        workers: int = 1,
        cancel: CancellationToken | None = None,
    ) -> TransferPlan:
        """Run a full pass and collect the records into a TransferPlan."""
        return TransferPlan(records=list(self.run(items, workers=workers, cancel=cancel)))

    def _decide_all(
        self,
        items: Iterable[EnumeratedItem],
        workers: int,
    ) -> Iterator[tuple[EnumeratedItem, Verdict]]:
        decide = self._filter_set.decide
        if workers == 1:
            for item in items:
                yield item, decide(item)
            return

        iterator = iter(items)
        batch_size = workers * _BATCH_PER_WORKER
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="xferfilter") as pool:
            while batch := list(islice(iterator, batch_size)):
                yield from zip(batch, pool.map(decide, batch), strict=True)


def _raise_if_cancelled(
    cancel: CancellationToken | None,
    materializer: AncestorMaterializer,
) -> None:
    if cancel is not None and cancel.cancelled:
        materializer.cancel()
        msg = "Filter pass cancelled"
        raise EngineCancelledError(msg)
