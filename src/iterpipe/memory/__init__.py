"""Memory monitoring for operators that retain state."""

from iterpipe.memory.monitor import (
    MemoryMonitor,
    MemoryPressureLevel,
    MemoryInfo,
    MemoryPressureHandler,
    StateSample,
    monitor,
)
from iterpipe.memory.handlers import LoggingHandler
from iterpipe.memory.guard import StateGuard

monitor.add_handler(LoggingHandler())

__all__ = [
    "MemoryMonitor",
    "MemoryPressureLevel",
    "MemoryInfo",
    "MemoryPressureHandler",
    "StateSample",
    "LoggingHandler",
    "StateGuard",
    "monitor",
]
