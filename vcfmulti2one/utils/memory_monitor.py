"""Memory usage monitoring and warning system."""

import logging
from typing import Dict

import psutil

__all__ = ["MemoryMonitor"]


class MemoryMonitor:
    """Tracks process memory during a run and warns near system limits."""

    WARNING_THRESHOLD_PERCENT = 50.0
    CRITICAL_THRESHOLD_PERCENT = 90.0

    def __init__(self, logger: logging.Logger):
        """Initialize memory monitor with logger and thresholds.

        Args:
            logger: Logger instance for output
        """
        self.logger = logger
        self.process = psutil.Process()

        total_memory_mb = psutil.virtual_memory().total / 1024 / 1024
        self.warning_threshold_mb = total_memory_mb * (
            self.WARNING_THRESHOLD_PERCENT / 100
        )
        self.critical_threshold_mb = total_memory_mb * (
            self.CRITICAL_THRESHOLD_PERCENT / 100
        )
        self.peak_mb = self.get_memory_usage_mb()

    def get_memory_usage_mb(self) -> float:
        """Current resident memory of this process in MB."""
        rss: int = self.process.memory_info().rss
        return float(rss / 1024 / 1024)

    def get_available_memory_mb(self) -> float:
        available: int = psutil.virtual_memory().available
        return float(available / 1024 / 1024)

    def check_memory_and_warn(self, operation: str = "operation") -> float:
        """Sample memory usage, remember the peak and warn past the thresholds.

        Args:
            operation: Name of operation being performed (for logging context)

        Returns:
            Current memory usage in MB

        Example:
            >>> monitor = MemoryMonitor(logger)
            >>> monitor.check_memory_and_warn("decomposition")
            >>> # Will log warning if memory usage exceeds thresholds
        """
        current_mb = self.get_memory_usage_mb()
        self.peak_mb = max(self.peak_mb, current_mb)

        if current_mb > self.critical_threshold_mb:
            self.logger.warning(
                f"CRITICAL: High memory usage during {operation}: {current_mb:.1f}MB "
                f"(>{self.critical_threshold_mb:.1f}MB threshold). "
                f"Available: {self.get_available_memory_mb():.1f}MB."
            )
        elif current_mb > self.warning_threshold_mb:
            self.logger.warning(
                f"WARNING: Elevated memory usage during {operation}: {current_mb:.1f}MB "
                f"(>{self.warning_threshold_mb:.1f}MB threshold)."
            )
        else:
            self.logger.debug(f"Memory usage during {operation}: {current_mb:.1f}MB")
        return current_mb

    def get_memory_summary(self) -> Dict[str, float]:
        """Current, peak, available and total memory in MB."""
        current_mb = self.get_memory_usage_mb()
        self.peak_mb = max(self.peak_mb, current_mb)
        return {
            "current_mb": current_mb,
            "peak_mb": self.peak_mb,
            "available_mb": self.get_available_memory_mb(),
            "total_mb": psutil.virtual_memory().total / 1024 / 1024,
        }
