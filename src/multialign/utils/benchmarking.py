# src/multialign/utils/benchmarking.py

import time
import logging
import threading
from typing import Dict, Optional
from contextlib import contextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class TimingStats:
    """Accumulated timings of one aligner phase."""

    name: str
    total_time: float = 0.0
    count: int = 0
    min_time: float = float("inf")
    max_time: float = 0.0

    def add_timing(self, elapsed: float) -> None:
        """Add a timing measurement.

        Args:
            elapsed: Time taken in seconds
        """
        self.total_time += elapsed
        self.count += 1
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)

    @property
    def avg_time(self) -> float:
        return self.total_time / self.count if self.count else 0.0

    def __str__(self) -> str:
        if not self.count:
            return f"{self.name}: No timing data"

        stats = [
            f"Total: {self.total_time:.2f}s",
            f"Count: {self.count}",
        ]
        if self.count > 1:
            stats += [
                f"Avg: {self.avg_time:.3f}s",
                f"Min: {self.min_time:.3f}s",
                f"Max: {self.max_time:.3f}s",
            ]
        return f"{self.name}: " + ", ".join(stats)


class PerformanceStats:
    """Collect and report timings of the aligner phases.

    Measurements may be added from worker threads.
    """

    def __init__(self) -> None:
        self.stats: Dict[str, TimingStats] = {}
        self._lock = threading.Lock()

    def get_stats(self, name: str) -> TimingStats:
        """Get or create stats for a phase."""
        with self._lock:
            if name not in self.stats:
                self.stats[name] = TimingStats(name=name)
            return self.stats[name]

    def add_timing(self, name: str, elapsed: float) -> None:
        stats = self.get_stats(name)
        with self._lock:
            stats.add_timing(elapsed)

    def as_dict(self) -> Dict[str, float]:
        """Total seconds spent per phase."""
        with self._lock:
            return {name: s.total_time for name, s in self.stats.items()}

    def report(self) -> str:
        """Generate a performance report."""
        if not self.stats:
            return "No performance data collected"

        lines = []
        total_time = sum(s.total_time for s in self.stats.values())

        for name in sorted(self.stats.keys()):
            stats = self.stats[name]
            if stats.total_time > 0:
                pct = (stats.total_time / total_time) * 100 if total_time > 0 else 0
                lines.append(f"{stats} ({pct:.1f}%)")

        return "\n".join(lines)


@contextmanager
def timer(name: str, stats: Optional[PerformanceStats] = None):
    """Context manager for timing code blocks with optional stats collection.

    Args:
        name: Name of the phase being timed
        stats: Optional PerformanceStats object to collect metrics
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logger.debug(f"{name} took {elapsed:.3f}s")
        if stats:
            stats.add_timing(name, elapsed)
