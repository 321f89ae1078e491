"""Utility modules for xferfilter.

This module exports commonly used utility functions.
"""

from xferfilter.utils.formatting import (
    console,
    create_decisions_table,
    err_console,
    format_decision_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_decisions_table",
    "err_console",
    "format_decision_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
