"""Memory monitoring and pressure detection."""

import time
import logging
import psutil
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass
from abc import ABC, abstractmethod

from iterpipe.config import config

logger = logging.getLogger(__name__)


class MemoryPressureLevel(Enum):
    """Memory pressure levels."""
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    def __gt__(self, other):
        if not isinstance(other, MemoryPressureLevel):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other):
        if not isinstance(other, MemoryPressureLevel):
            return NotImplemented
        return self.value >= other.value


@dataclass
class StateSample:
    """Retained state of one stateful operator at the time of a check."""
    operator: str
    retained: int

    def __str__(self) -> str:
        return f"{self.operator} retaining {self.retained:,} elements"


@dataclass
class MemoryInfo:
    """Memory usage information."""
    total: int
    available: int
    used: int
    percent: float
    pressure_level: MemoryPressureLevel
    timestamp: float
    sample: Optional[StateSample] = None

    @property
    def used_gb(self) -> float:
        return self.used / (1024 ** 3)

    @property
    def available_gb(self) -> float:
        return self.available / (1024 ** 3)

    def __str__(self) -> str:
        text = (f"Memory: {self.percent:.1f}% used "
                f"({self.used_gb:.2f}/{self.available_gb:.2f} GB), "
                f"Pressure: {self.pressure_level.name}")
        if self.sample is not None:
            text += f", {self.sample}"
        return text


class MemoryPressureHandler(ABC):
    """Abstract base class for memory pressure handlers."""

    @abstractmethod
    def can_handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> bool:
        """Check if this handler should handle the given pressure level."""
        pass

    @abstractmethod
    def handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> None:
        """Handle memory pressure."""
        pass


class MemoryMonitor:
    """Sample system memory and notify handlers about pressure."""

    def __init__(self, memory_limit: Optional[int] = None, max_history: int = 100):
        """
        Initialize memory monitor.

        Args:
            memory_limit: Custom memory limit in bytes (None for configured limit)
            max_history: Number of samples kept for inspection
        """
        self._memory_limit = memory_limit
        self.handlers: List[MemoryPressureHandler] = []
        self._history: List[MemoryInfo] = []
        self._max_history = max_history

    @property
    def memory_limit(self) -> int:
        return self._memory_limit or config.memory_limit

    @property
    def history(self) -> List[MemoryInfo]:
        return list(self._history)

    def add_handler(self, handler: MemoryPressureHandler) -> None:
        """Add a memory pressure handler."""
        self.handlers.append(handler)

    def remove_handler(self, handler: MemoryPressureHandler) -> None:
        """Remove a memory pressure handler."""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def get_memory_info(self, sample: Optional[StateSample] = None) -> MemoryInfo:
        """Get current memory information."""
        mem = psutil.virtual_memory()

        # Use configured limit if lower than system memory
        total = min(mem.total, self.memory_limit)
        used = mem.used
        available = max(0, total - used)
        percent = (used / total) * 100 if total else 100.0

        if percent >= 95:
            level = MemoryPressureLevel.CRITICAL
        elif percent >= 85:
            level = MemoryPressureLevel.HIGH
        elif percent >= 70:
            level = MemoryPressureLevel.MEDIUM
        elif percent >= 50:
            level = MemoryPressureLevel.LOW
        else:
            level = MemoryPressureLevel.NONE

        return MemoryInfo(
            total=total,
            available=available,
            used=used,
            percent=percent,
            pressure_level=level,
            timestamp=time.time(),
            sample=sample,
        )

    def check_memory_pressure(self, sample: Optional[StateSample] = None) -> MemoryPressureLevel:
        """Check current memory pressure and notify handlers."""
        info = self.get_memory_info(sample)

        self._history.append(info)
        if len(self._history) > self._max_history:
            self._history.pop(0)

        for handler in self.handlers:
            if handler.can_handle(info.pressure_level, info):
                try:
                    handler.handle(info.pressure_level, info)
                except Exception:
                    # A failing handler must not break the pipeline it observes
                    logger.warning("Memory pressure handler %r failed", handler, exc_info=True)

        return info.pressure_level


# Global monitor instance
monitor = MemoryMonitor()
