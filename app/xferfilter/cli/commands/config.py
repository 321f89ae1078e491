"""Filter options file commands.

Provides commands to validate, display and initialize the TOML filter
options file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from xferfilter.core.config import (
    FilterOptions,
    build_filter_set,
    load_filter_options,
    save_filter_options,
)
from xferfilter.core.errors import FilterConfigError, FilterOptionsNotFoundError
from xferfilter.core.paths import get_filter_options_path
from xferfilter.filters.categories import OperationKind
from xferfilter.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Validate and manage filter option files.",
    invoke_without_command=True,
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Filter options file (default: XDG config path)."),
]


@app.command()
def check(config_path: ConfigPathOption = None) -> None:
    """Parse an options file and report configuration errors."""
    path = config_path or get_filter_options_path()
    try:
        filter_set = build_filter_set(load_filter_options(path))
    except FilterConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title=f"Filters ({filter_set.operation.value})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Category", no_wrap=True)
    table.add_column("Value")
    for kind, category in filter_set.categories.items():
        table.add_row(kind.value, f"[muted]{category.describe() or '(whole source)'}[/muted]")

    if filter_set.categories:
        console.print(table)
    else:
        print_info("No filters configured: every item is accepted.")
    print_success(f"{path} is valid (recursive={filter_set.recursive}).")


@app.command()
def init(
    config_path: ConfigPathOption = None,
    operation: Annotated[
        OperationKind,
        typer.Option("--operation", "-o", help="Job kind.", case_sensitive=False),
    ] = OperationKind.COPY,
    recursive: Annotated[
        bool,
        typer.Option("--recursive/--no-recursive", help="Descend into sub-folders."),
    ] = True,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file."),
    ] = False,
) -> None:
    """Write a starter options file."""
    path = config_path or get_filter_options_path()
    if path.exists() and not force:
        print_error(f"Options file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_filter_options(FilterOptions(operation=operation, recursive=recursive), path)
    except FilterConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Wrote {saved}")


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Print the options stored in a file."""
    path = config_path or get_filter_options_path()
    try:
        options = load_filter_options(path)
    except FilterOptionsNotFoundError as e:
        print_error(str(e))
        print_info("Run 'xferfilter config init' to create one.")
        raise typer.Exit(code=1) from e
    except FilterConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    for name, value in options.model_dump(mode="json").items():
        if value is not None:
            console.print(f"[header]{name}[/header] = {value!r}")
