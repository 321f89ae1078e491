"""xferfilter - enumeration-time filtering for copy, sync and remove jobs."""

__version__ = "0.1.0"
