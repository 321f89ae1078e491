"""Exception hierarchy for xferfilter.

Configuration errors are raised while a filter set is being built,
before any item is evaluated. Engine errors are raised while a pass is
running.
"""


class FilterConfigError(Exception):
    """Base exception for invalid filter configuration."""


class PatternSyntaxError(FilterConfigError):
    """Raised when a path or glob pattern cannot be parsed.

    Attributes:
        option: Name of the option the pattern came from, if known.
        pattern: The offending pattern entry.
    """

    def __init__(self, message: str, *, pattern: str, option: str | None = None) -> None:
        self.pattern = pattern
        self.option = option
        prefix = f"{option}: " if option else ""
        super().__init__(f"{prefix}{message}: {pattern!r}")


class TimestampParseError(FilterConfigError):
    """Raised when an include-after/include-before timestamp is invalid."""


class FilterOptionsNotFoundError(FilterConfigError):
    """Raised when a filter options file is not found."""


class FilterOptionsParseError(FilterConfigError):
    """Raised when a filter options file cannot be parsed."""


class EngineError(Exception):
    """Base exception for filter engine runtime errors."""


class EngineStateError(EngineError):
    """Raised on an illegal ancestor materializer state transition."""


class EngineCancelledError(EngineError):
    """Raised when a pass is used after it has been cancelled."""
