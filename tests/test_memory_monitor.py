#!/usr/bin/env python3
"""
Tests for memory monitoring of stateful operators.
"""

import logging
import unittest
from unittest import mock

from iterpipe import IterPipeConfig
from iterpipe.memory import (
    LoggingHandler, MemoryMonitor, MemoryPressureHandler, MemoryPressureLevel,
    StateGuard, StateSample,
)
from iterpipe.streams import buffer_toggle, distinct, repeat, take

GB = 1024 ** 3


def fake_memory(percent_used: float, total: int = 16 * GB):
    return mock.Mock(total=total, used=int(total * percent_used / 100))


class RecordingHandler(MemoryPressureHandler):
    def __init__(self):
        self.events = []

    def can_handle(self, level, info):
        return True

    def handle(self, level, info):
        self.events.append((level, info))


class FailingHandler(MemoryPressureHandler):
    def can_handle(self, level, info):
        return True

    def handle(self, level, info):
        raise RuntimeError("handler failure")


class ConfigTestCase(unittest.TestCase):
    """Restores global configuration after each test."""

    def setUp(self):
        self.config = IterPipeConfig.get_instance()
        self._saved = (self.config.monitor_state, self.config.state_check_interval)

    def tearDown(self):
        IterPipeConfig.set_defaults(
            monitor_state=self._saved[0],
            state_check_interval=self._saved[1],
        )


class TestMemoryMonitor(unittest.TestCase):
    """Test MemoryMonitor pressure detection."""

    def test_pressure_levels(self):
        """Test usage percentages map to pressure levels."""
        monitor = MemoryMonitor(memory_limit=64 * GB)
        expected = [
            (10, MemoryPressureLevel.NONE),
            (55, MemoryPressureLevel.LOW),
            (75, MemoryPressureLevel.MEDIUM),
            (90, MemoryPressureLevel.HIGH),
            (97, MemoryPressureLevel.CRITICAL),
        ]
        for percent, level in expected:
            with mock.patch("psutil.virtual_memory", return_value=fake_memory(percent)):
                self.assertEqual(monitor.check_memory_pressure(), level)
        self.assertEqual(len(monitor.history), len(expected))

    def test_memory_limit_caps_total(self):
        """Test a lower memory limit raises the reported usage."""
        monitor = MemoryMonitor(memory_limit=8 * GB)
        with mock.patch("psutil.virtual_memory", return_value=fake_memory(50)):
            info = monitor.get_memory_info()
        self.assertEqual(info.total, 8 * GB)
        self.assertEqual(info.pressure_level, MemoryPressureLevel.CRITICAL)

    def test_handlers_receive_sample(self):
        """Test handlers see the operator sample with the memory info."""
        monitor = MemoryMonitor(memory_limit=64 * GB)
        handler = RecordingHandler()
        monitor.add_handler(handler)
        sample = StateSample("distinct", 1234)

        with mock.patch("psutil.virtual_memory", return_value=fake_memory(80)):
            monitor.check_memory_pressure(sample)

        self.assertEqual(len(handler.events), 1)
        level, info = handler.events[0]
        self.assertEqual(level, MemoryPressureLevel.MEDIUM)
        self.assertIs(info.sample, sample)
        self.assertIn("distinct retaining 1,234 elements", str(info))

        monitor.remove_handler(handler)
        with mock.patch("psutil.virtual_memory", return_value=fake_memory(80)):
            monitor.check_memory_pressure(sample)
        self.assertEqual(len(handler.events), 1)

    def test_failing_handler_is_logged_not_raised(self):
        """Test handler errors never escape the monitor."""
        monitor = MemoryMonitor(memory_limit=64 * GB)
        monitor.add_handler(FailingHandler())

        with mock.patch("psutil.virtual_memory", return_value=fake_memory(80)):
            with self.assertLogs("iterpipe.memory.monitor", level="WARNING") as logs:
                level = monitor.check_memory_pressure()

        self.assertEqual(level, MemoryPressureLevel.MEDIUM)
        self.assertIn("failed", logs.output[0])


class TestLoggingHandler(unittest.TestCase):
    """Test LoggingHandler output."""

    def setUp(self):
        self.logger = logging.getLogger("iterpipe.tests.pressure")
        self.monitor = MemoryMonitor(memory_limit=64 * GB)

    def info_at(self, percent):
        with mock.patch("psutil.virtual_memory", return_value=fake_memory(percent)):
            return self.monitor.get_memory_info(StateSample("repeat", 10))

    def test_levels_map_to_log_levels(self):
        """Test pressure levels map to logging levels."""
        handler = LoggingHandler(logger=self.logger, min_level=MemoryPressureLevel.LOW)
        with self.assertLogs(self.logger, level="INFO") as logs:
            for percent in (55, 75, 90, 97):
                info = self.info_at(percent)
                handler.handle(info.pressure_level, info)

        levels = [record.levelname for record in logs.records]
        self.assertEqual(levels, ["INFO", "WARNING", "ERROR", "CRITICAL"])
        self.assertIn("repeat retaining 10 elements", logs.output[1])

    def test_min_level(self):
        """Test handler ignores pressure below its minimum level."""
        handler = LoggingHandler(logger=self.logger)
        low = self.info_at(55)
        medium = self.info_at(75)
        self.assertFalse(handler.can_handle(low.pressure_level, low))
        self.assertTrue(handler.can_handle(medium.pressure_level, medium))

    def test_repeated_messages_are_rate_limited(self):
        """Test the same level is logged once per interval."""
        handler = LoggingHandler(logger=self.logger, interval=3600)
        info = self.info_at(75)
        with self.assertLogs(self.logger, level="WARNING") as logs:
            handler.handle(info.pressure_level, info)
            handler.handle(info.pressure_level, info)
            high = self.info_at(90)
            handler.handle(high.pressure_level, high)
        self.assertEqual(len(logs.records), 2)


class TestStateGuard(ConfigTestCase):
    """Test StateGuard sampling."""

    def test_checks_every_interval(self):
        """Test memory is sampled every state_check_interval additions."""
        IterPipeConfig.set_defaults(monitor_state=True, state_check_interval=3)
        monitor = mock.Mock()
        guard = StateGuard("buffer", monitor)

        for _ in range(7):
            guard.grow()

        self.assertEqual(guard.retained, 7)
        self.assertEqual(monitor.check_memory_pressure.call_args_list, [
            mock.call(StateSample("buffer", 3)),
            mock.call(StateSample("buffer", 6)),
        ])

    def test_shrink(self):
        """Test released elements reduce the retained count."""
        guard = StateGuard("buffer", mock.Mock())
        guard.grow(5)
        guard.shrink(3)
        self.assertEqual(guard.retained, 2)
        guard.shrink(10)
        self.assertEqual(guard.retained, 0)

    def test_disabled_monitoring(self):
        """Test no samples are taken when monitoring is off."""
        IterPipeConfig.set_defaults(monitor_state=False, state_check_interval=1)
        monitor = mock.Mock()
        guard = StateGuard("distinct", monitor)
        guard.grow(10)
        monitor.check_memory_pressure.assert_not_called()


class TestOperatorMonitoring(ConfigTestCase):
    """Test stateful operators report retained state."""

    def test_distinct_reports_key_set_growth(self):
        """Test distinct samples memory as its key set grows."""
        IterPipeConfig.set_defaults(monitor_state=True, state_check_interval=3)
        with mock.patch("iterpipe.memory.guard.default_monitor") as monitor:
            result = list(distinct()([1, 1, 2, 3, 3, 4, 5, 6, 6]))

        self.assertEqual(result, [1, 2, 3, 4, 5, 6])
        self.assertEqual(monitor.check_memory_pressure.call_args_list, [
            mock.call(StateSample("distinct", 3)),
            mock.call(StateSample("distinct", 6)),
        ])

    def test_repeat_reports_recorded_pass(self):
        """Test repeat samples memory while recording its first pass."""
        IterPipeConfig.set_defaults(monitor_state=True, state_check_interval=2)
        with mock.patch("iterpipe.memory.guard.default_monitor") as monitor:
            result = list(take(6)(repeat()([1, 2, 3, 4])))

        self.assertEqual(result, [1, 2, 3, 4, 1, 2])
        self.assertEqual(monitor.check_memory_pressure.call_count, 2)

    def test_buffer_toggle_reports_open_windows(self):
        """Test overlapping windows count every retained copy."""
        IterPipeConfig.set_defaults(monitor_state=True, state_check_interval=4)
        with mock.patch("iterpipe.memory.guard.default_monitor") as monitor:
            result = list(buffer_toggle(lambda v, i: True)([1, 2, 3]))

        self.assertEqual(result, [[1, 2, 3], [2, 3], [3]])
        monitor.check_memory_pressure.assert_called_once_with(StateSample("buffer_toggle", 4))

    def test_output_unchanged_under_pressure(self):
        """Test logged pressure never alters emitted values."""
        IterPipeConfig.set_defaults(monitor_state=True, state_check_interval=1)
        with mock.patch("psutil.virtual_memory", return_value=fake_memory(99, total=1 * GB)):
            result = list(distinct()([3, 3, 1, 2, 1]))
        self.assertEqual(result, [3, 1, 2])


class TestConfig(ConfigTestCase):
    """Test configuration handling."""

    def test_unknown_option(self):
        """Test unknown options are rejected."""
        with self.assertRaises(AttributeError):
            IterPipeConfig.set_defaults(no_such_option=1)

    def test_invalid_interval(self):
        """Test the check interval must be positive."""
        with self.assertRaises(ValueError):
            IterPipeConfig.set_defaults(state_check_interval=0)

    def test_format_bytes(self):
        """Test byte formatting."""
        self.assertEqual(self.config.format_bytes(2048), "2.00 KB")


if __name__ == "__main__":
    unittest.main()
