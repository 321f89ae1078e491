"""CLI commands for xferfilter.

This package contains all subcommand implementations.
"""

from xferfilter.cli.commands import config, evaluate

__all__ = ["config", "evaluate"]
