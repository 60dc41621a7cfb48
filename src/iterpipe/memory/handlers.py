"""Memory pressure handlers."""

import time
import logging
from typing import Dict, Optional

from iterpipe.config import config
from iterpipe.memory.monitor import (
    MemoryPressureHandler,
    MemoryPressureLevel,
    MemoryInfo
)


class LoggingHandler(MemoryPressureHandler):
    """Log memory pressure events."""

    def __init__(self,
                 logger: Optional[logging.Logger] = None,
                 min_level: MemoryPressureLevel = MemoryPressureLevel.MEDIUM,
                 interval: Optional[float] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.min_level = min_level
        self.interval = interval
        self._last_log: Dict[MemoryPressureLevel, float] = {}

    def can_handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> bool:
        return level >= self.min_level

    def handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> None:
        # Only log if level changed or the interval passed
        interval = config.pressure_log_interval if self.interval is None else self.interval
        last_time = self._last_log.get(level)
        if last_time is not None and time.time() - last_time < interval:
            return

        self._last_log[level] = time.time()

        if level == MemoryPressureLevel.CRITICAL:
            self.logger.critical("CRITICAL memory pressure: %s", info)
        elif level == MemoryPressureLevel.HIGH:
            self.logger.error("HIGH memory pressure: %s", info)
        elif level == MemoryPressureLevel.MEDIUM:
            self.logger.warning("MEDIUM memory pressure: %s", info)
        else:
            self.logger.info("Memory pressure: %s", info)
