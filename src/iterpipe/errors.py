"""
Exceptions raised by iterpipe operators and sinks.

Errors raised by user callbacks are never wrapped; they propagate unchanged
from the pull that triggered them.
"""


class IterPipeError(Exception):
    """Base class for iterpipe errors."""


class EmptySequenceError(IterPipeError, TypeError):
    """Raised when a value is required but the upstream produced nothing."""

    def __init__(self, message: str = "No values to unwrap."):
        super().__init__(message)


class IndexNotReachedError(IterPipeError, IndexError):
    """Raised when the upstream finishes before a requested index."""

    def __init__(self, index: int, message: str = "Iterator finished before expected index."):
        super().__init__(message)
        self.index = index
