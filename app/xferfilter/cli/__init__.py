"""CLI package for xferfilter.

This package contains the Typer application and all subcommands.
"""

from xferfilter.cli.main import app

__all__ = ["app"]
