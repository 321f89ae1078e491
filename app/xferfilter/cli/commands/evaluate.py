"""Evaluate command implementation.

Runs the filter engine over a local directory or a JSON-lines listing
and prints the resulting transfer plan.
"""

import json
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from xferfilter.core.config import FilterOptions, build_filter_set, load_filter_options
from xferfilter.core.errors import FilterConfigError
from xferfilter.filters.categories import OperationKind
from xferfilter.filters.engine import FilterEngine, TransferPlan
from xferfilter.listing.jsonl import ListingError, read_listing
from xferfilter.listing.local import LocalLister
from xferfilter.models.item import EnumeratedItem
from xferfilter.utils.formatting import (
    console,
    create_decisions_table,
    format_decision_row,
    print_error,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Evaluate filters against a source listing.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def resolve_options(config_path: Path | None, overrides: dict[str, Any]) -> FilterOptions:
    """Load options from a file (if given) and apply CLI overrides.

    Args:
        config_path: Optional TOML options file.
        overrides: CLI values; None entries are left untouched.

    Returns:
        Merged FilterOptions.

    Raises:
        FilterConfigError: If the file is invalid or the merge fails.
    """
    base = load_filter_options(config_path) if config_path else FilterOptions()
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return base
    merged = base.model_dump()
    merged.update(updates)
    try:
        return FilterOptions.model_validate(merged)
    except ValueError as e:
        raise FilterConfigError(f"Invalid filter options: {e}") from e


@app.callback(invoke_without_command=True)
def evaluate(
    source: Annotated[
        Path | None,
        typer.Option("--source", "-s", help="Local source directory to list."),
    ] = None,
    listing: Annotated[
        Path | None,
        typer.Option("--listing", "-L", help="JSON-lines listing to read instead of a directory."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="TOML filter options file."),
    ] = None,
    operation: Annotated[
        OperationKind | None,
        typer.Option("--operation", "-o", help="Job kind.", case_sensitive=False),
    ] = None,
    recursive: Annotated[
        bool | None,
        typer.Option("--recursive/--no-recursive", help="Descend into sub-folders."),
    ] = None,
    include_path: Annotated[
        str | None, typer.Option("--include-path", help="Semicolon-delimited paths to include.")
    ] = None,
    exclude_path: Annotated[
        str | None, typer.Option("--exclude-path", help="Semicolon-delimited paths to exclude.")
    ] = None,
    include_pattern: Annotated[
        str | None, typer.Option("--include-pattern", help="Semicolon-delimited globs to include.")
    ] = None,
    exclude_pattern: Annotated[
        str | None, typer.Option("--exclude-pattern", help="Semicolon-delimited globs to exclude.")
    ] = None,
    include_after: Annotated[
        str | None, typer.Option("--include-after", help="Only items modified after (ISO-8601).")
    ] = None,
    include_before: Annotated[
        str | None, typer.Option("--include-before", help="Only items modified before (ISO-8601).")
    ] = None,
    relative_source_path: Annotated[
        str | None,
        typer.Option("--relative-source-path", help="Remove scope relative to the source root."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
    show_rejected: Annotated[
        bool,
        typer.Option("--show-rejected", help="Also list rejected items."),
    ] = False,
    workers: Annotated[
        int,
        typer.Option("--workers", "-w", min=1, help="Threads used for decisions."),
    ] = 1,
) -> None:
    """Evaluate filters against a source and print the transfer plan."""
    if (source is None) == (listing is None):
        print_error("Provide exactly one of --source or --listing.")
        raise typer.Exit(code=1)

    try:
        options = resolve_options(
            config_path,
            {
                "operation": operation,
                "recursive": recursive,
                "include_path": include_path,
                "exclude_path": exclude_path,
                "include_pattern": include_pattern,
                "exclude_pattern": exclude_pattern,
                "include_after": include_after,
                "include_before": include_before,
                "relative_source_path": relative_source_path,
            },
        )
        filter_set = build_filter_set(options)
    except FilterConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    items: Iterable[EnumeratedItem]
    if source is not None:
        lister = LocalLister(source, recursive=options.recursive)
        if not lister.is_available():
            print_error(f"Source is not a directory: {source}")
            raise typer.Exit(code=1)
        items = lister.list()
    else:
        items = read_listing(listing)  # type: ignore[arg-type]

    try:
        plan = FilterEngine(filter_set).plan(items, workers=workers)
    except ListingError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        _print_json(plan, show_rejected)
        return

    _print_table(plan, show_rejected)


def _print_json(plan: TransferPlan, show_rejected: bool) -> None:
    records = plan.records if show_rejected else [r for r in plan.records if r.accepted]
    payload = {
        "summary": plan.summary(),
        "records": [r.to_dict() for r in records],
    }
    console.print_json(json.dumps(payload))


def _print_table(plan: TransferPlan, show_rejected: bool) -> None:
    records = plan.records if show_rejected else [r for r in plan.records if r.accepted]
    if not records:
        print_warning("No items matched the configured filters.")
        return

    table = create_decisions_table()
    for record in records:
        table.add_row(*format_decision_row(record))
    console.print(table)

    summary = plan.summary()
    print_success(
        f"{summary['files']} file(s) to transfer, "
        f"{summary['folders']} folder(s) to create, "
        f"{summary['rejected']} rejected"
    )
