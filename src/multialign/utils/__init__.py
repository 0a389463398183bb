from .benchmarking import PerformanceStats, TimingStats, timer
from .logging_setup import setup_logging

__all__ = [
    "PerformanceStats",
    "TimingStats",
    "timer",
    "setup_logging",
]
