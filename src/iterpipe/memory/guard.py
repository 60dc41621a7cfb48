"""Periodic memory checks for operators that retain elements."""

import logging
from typing import Optional

from iterpipe.config import config
from iterpipe.memory.monitor import MemoryMonitor, StateSample, monitor as default_monitor

logger = logging.getLogger(__name__)


class StateGuard:
    """
    Tracks how many elements an operator holds and samples memory pressure
    every ``config.state_check_interval`` additions.

    A guard belongs to a single application of an operator, so its counter
    resets with every new pull sequence.
    """

    def __init__(self, operator: str, memory_monitor: Optional[MemoryMonitor] = None):
        self.operator = operator
        self._monitor = memory_monitor
        self.retained = 0
        self._since_check = 0

    @property
    def monitor(self) -> MemoryMonitor:
        return self._monitor or default_monitor

    def grow(self, count: int = 1) -> None:
        """Record ``count`` newly retained elements."""
        self.retained += count
        if not config.monitor_state:
            return
        self._since_check += count
        if self._since_check >= config.state_check_interval:
            self._since_check = 0
            self.check()

    def shrink(self, count: int) -> None:
        """Record ``count`` elements released by the operator."""
        self.retained = max(0, self.retained - count)

    def check(self):
        sample = StateSample(self.operator, self.retained)
        logger.debug("Sampling memory for %s", sample)
        return self.monitor.check_memory_pressure(sample)
