"""End-to-end filter scenarios through the FilterEngine.

Each scenario builds a source tree, runs a full pass and checks which
entries end up in the transfer plan.
"""

from datetime import UTC, datetime, timedelta

import pytest
from xferfilter.core.config import FilterOptions, build_filter_set
from xferfilter.core.errors import EngineCancelledError
from xferfilter.filters.categories import OperationKind
from xferfilter.filters.engine import CancellationToken, FilterEngine, TransferPlan
from xferfilter.models.item import EnumeratedItem
from xferfilter.models.verdict import MatchReason


def _plan(items: list[EnumeratedItem], workers: int = 1, **options: object) -> TransferPlan:
    filter_set = build_filter_set(FilterOptions(**options))  # type: ignore[arg-type]
    return FilterEngine(filter_set).plan(items, workers=workers)


def _accepted(plan: TransferPlan) -> set[str]:
    return plan.accepted_paths


class TestIncludePath:
    """include-path scenario."""

    def test_include_path(self, include_path_tree: list[EnumeratedItem]) -> None:
        plan = _plan(include_path_tree, recursive=True, include_path="sub/subsub;wantedfile")
        accepted = _accepted(plan)

        for path in ("wantedfile", "sub/subsub", "sub/subsub/filea", "sub/subsub/fileb"):
            assert path in accepted
        for path in (
            "",
            "filea",
            "wantedfileabc",
            "sub/filea",
            "sub/subsubsub",
            "sub/subsubsub/filez",
            "sub/somethingelse/subsub/filey",
            "othersub/sub/subsub/filey",
            "othersub/wantedfile",
        ):
            assert path not in accepted, path

    def test_include_path_synthesizes_parent(self, include_path_tree: list[EnumeratedItem]) -> None:
        plan = _plan(include_path_tree, recursive=True, include_path="sub/subsub;wantedfile")
        folders = {r.path: r.reason for r in plan.folders_to_create}

        assert folders == {
            "sub": MatchReason.ANCESTOR_OF_MATCH,
            "sub/subsub": MatchReason.SELF_MATCHED,
        }


class TestIncludePattern:
    """include-pattern scenario."""

    def test_include_pattern(self, make_items) -> None:
        items = make_items(
            "",
            "A2020log",
            "A2020log.txte",
            "subdir/",
            "2020_file1",
            "file2.txt",
            "file3_mid_txt",
            "subdir/2020_file5",
            "subdir/file6.txt",
            "subdir/file7_A_mid_B",
            "file8",
        )
        plan = _plan(items, recursive=True, include_pattern="*.txt;2020*;*mid*;file8")

        assert _accepted(plan) == {
            "subdir",
            "2020_file1",
            "file2.txt",
            "file3_mid_txt",
            "subdir/2020_file5",
            "subdir/file6.txt",
            "subdir/file7_A_mid_B",
            "file8",
        }


class TestExcludePath:
    """exclude-path scenario."""

    def test_exclude_path(self, make_items) -> None:
        items = make_items(
            "",
            "excludeFile",
            "subL1/",
            "subL1/subL2/",
            "subL1/subL2/file1",
            "sub/",
            "subL1/sub/",
            "sub/subL1/",
            "subL1/sub/subL2/",
            "sub/subL1/subL2/",
            "sub/excludeFile",
            "subL1/sub/subL2/fileA",
            "sub/subL1/subL2/fileB",
        )
        plan = _plan(items, recursive=True, exclude_path="subL1/subL2;excludeFile")

        assert _accepted(plan) == {
            "",
            "subL1",
            "sub",
            "subL1/sub",
            "sub/subL1",
            "subL1/sub/subL2",
            "sub/subL1/subL2",
            "sub/excludeFile",
            "subL1/sub/subL2/fileA",
            "sub/subL1/subL2/fileB",
        }


class TestExcludePattern:
    """exclude-pattern scenario."""

    def test_exclude_pattern(self, make_items) -> None:
        items = make_items(
            "A2020.log",
            "2020log.txt",
            "A2020_mid_file",
            "excludeFile",
            "subdir/",
            "subdir/A2020.log",
            "subdir/2020log.txt",
            "subdir/A2020_mid_file",
            "sample.txt",
            "subdir/sample.txt",
        )
        plan = _plan(items, recursive=True, exclude_pattern="*.log;2020*;*mid*;excludeFile")

        assert _accepted(plan) == {"subdir", "sample.txt", "subdir/sample.txt"}

    @pytest.mark.parametrize("reverse", [False, True])
    def test_parent_of_transferred_file_is_created(self, make_items, reverse: bool) -> None:
        items = make_items("", "2020dir/", "2020dir/sample.txt", "2020dir/2020.log")
        if reverse:
            items.reverse()
        plan = _plan(items, recursive=True, exclude_pattern="2020*")

        folders = {r.path for r in plan.folders_to_create}
        files = {r.path for r in plan.files_to_transfer}
        assert files == {"2020dir/sample.txt"}
        assert folders == {"", "2020dir"}
        for path in files:
            assert path.rpartition("/")[0] in folders


class TestIncludeAfter:
    """include-after scenario."""

    def test_only_items_modified_after_threshold(self, make_items) -> None:
        threshold = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)
        old = make_items("filea", "fileb", last_modified=threshold - timedelta(seconds=4))
        # fileb is re-created after the threshold and gets a new timestamp
        recreated = make_items("fileb", last_modified=threshold + timedelta(seconds=4))

        before = _plan(old, recursive=True, include_after=threshold.isoformat())
        assert _accepted(before) == set()

        after = _plan(
            [old[0], *recreated],
            recursive=True,
            include_after="2024-06-01T12:00:00Z",
        )
        assert _accepted(after) == {"fileb"}

    def test_ignored_for_sync(self, make_items) -> None:
        items = make_items("filea", last_modified=datetime(2000, 1, 1, tzinfo=UTC))
        plan = _plan(
            items,
            recursive=True,
            operation=OperationKind.SYNC,
            include_after="2024-06-01T12:00:00Z",
        )
        assert _accepted(plan) == {"filea"}


class TestRemoveScope:
    """Remove scope scenarios."""

    def test_remove_single_file(self, make_items) -> None:
        items = make_items("file1.txt", "file2.txt")
        plan = _plan(items, operation=OperationKind.REMOVE, relative_source_path="file2.txt")
        assert _accepted(plan) == {"file2.txt"}

    def test_remove_folder(self, make_items) -> None:
        items = make_items(
            "file1.txt",
            "folder1/",
            "folder1/file11.txt",
            "folder1/file12.txt",
            "folder2/",
            "folder2/file21.txt",
            "folder2/file22.txt",
        )
        plan = _plan(
            items,
            recursive=True,
            operation=OperationKind.REMOVE,
            relative_source_path="folder2/",
        )
        assert _accepted(plan) == {"folder2", "folder2/file21.txt", "folder2/file22.txt"}

    def test_remove_container(self, make_items) -> None:
        items = make_items("", "file1.txt", "folder1/", "folder1/file11.txt", "folder1/file12.txt")
        plan = _plan(items, recursive=True, operation=OperationKind.REMOVE, relative_source_path="")
        assert _accepted(plan) == {
            "",
            "file1.txt",
            "folder1",
            "folder1/file11.txt",
            "folder1/file12.txt",
        }


class TestWorkers:
    """Threaded decisions give the same plan as inline decisions."""

    def test_parallel_matches_serial(self, include_path_tree: list[EnumeratedItem]) -> None:
        options = {"recursive": True, "include_path": "sub/subsub;wantedfile"}
        serial = _plan(include_path_tree, **options)
        parallel = _plan(include_path_tree, workers=4, **options)
        assert parallel.records == serial.records

    def test_invalid_worker_count(self) -> None:
        engine = FilterEngine(build_filter_set(FilterOptions()))
        with pytest.raises(ValueError, match="workers"):
            list(engine.run([], workers=0))


class TestCancellation:
    """Cancelling a pass stops emission."""

    def test_cancel_mid_pass(self, make_items) -> None:
        engine = FilterEngine(build_filter_set(FilterOptions(recursive=True)))
        token = CancellationToken()
        items = make_items("a", "b", "c")
        records = engine.run(items, cancel=token)

        first = next(records)
        assert first.path == "a"
        token.cancel()
        with pytest.raises(EngineCancelledError):
            next(records)

    def test_cancel_before_start(self, make_items) -> None:
        engine = FilterEngine(build_filter_set(FilterOptions(recursive=True)))
        token = CancellationToken()
        token.cancel()
        assert token.cancelled
        with pytest.raises(EngineCancelledError):
            engine.plan(make_items("a"), cancel=token)


class TestTransferPlan:
    """TransferPlan views."""

    def test_summary(self, make_items) -> None:
        items = make_items("", "keep.txt", "drop.bin", "dir/", "dir/keep.txt")
        plan = _plan(items, recursive=True, include_pattern="*.txt")

        assert plan.summary() == {"folders": 1, "files": 2, "rejected": 2}
        assert {r.path for r in plan.rejected} == {"", "drop.bin"}
