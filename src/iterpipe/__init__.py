"""
iterpipe: lazy, pull-based sequence pipelines.

Operators transform any iterable into a new lazy iterator without
materializing it. They compose with ``pipe`` or through the fluent
``Stream`` wrapper:

    >>> from iterpipe import pipe, streams as s
    >>> pipe(s.range(1), s.filter(lambda v, i: v % 3 == 0), s.take(3), s.unwrap())
    [3, 6, 9]
"""

from iterpipe.config import IterPipeConfig
from iterpipe.errors import IterPipeError, EmptySequenceError, IndexNotReachedError
from iterpipe.memory import MemoryMonitor, MemoryPressureLevel
from iterpipe.pipe import pipe
from iterpipe.streams import Stream, StreamOperator

__version__ = "0.1.0"

__all__ = [
    "IterPipeConfig",
    "IterPipeError",
    "EmptySequenceError",
    "IndexNotReachedError",
    "MemoryMonitor",
    "MemoryPressureLevel",
    "Stream",
    "StreamOperator",
    "pipe",
]
