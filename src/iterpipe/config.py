"""
Configuration management for iterpipe pipelines.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
import psutil


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class IterPipeConfig:
    """Global configuration for iterpipe operators."""

    # State monitoring
    monitor_state: bool = field(default_factory=lambda: _env_flag("ITERPIPE_MONITOR_STATE", True))
    state_check_interval: int = 10_000  # retained elements between memory checks

    # Memory limits
    memory_limit: int = field(default_factory=lambda: int(psutil.virtual_memory().total * 0.8))

    # Logging
    pressure_log_interval: float = 60.0  # seconds between repeated pressure logs

    _instance: Optional['IterPipeConfig'] = None

    def __post_init__(self):
        """Validate settings."""
        if self.state_check_interval < 1:
            raise ValueError("state_check_interval must be at least 1")

    @classmethod
    def get_instance(cls) -> 'IterPipeConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_defaults(cls, **kwargs) -> None:
        """Set default configuration values."""
        instance = cls.get_instance()
        for key, value in kwargs.items():
            if not hasattr(instance, key):
                raise AttributeError(f"Unknown configuration option: {key}")
            if key == "state_check_interval" and value < 1:
                raise ValueError("state_check_interval must be at least 1")
            setattr(instance, key, value)

    def format_bytes(self, bytes: int) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes < 1024.0:
                return f"{bytes:.2f} {unit}"
            bytes /= 1024.0
        return f"{bytes:.2f} PB"


# Global configuration instance
config = IterPipeConfig.get_instance()
