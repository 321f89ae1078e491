"""Core configuration, paths and error types for xferfilter."""
