"""Performance monitoring utilities for hulud-guard."""

import functools
import logging
import os
import time
import tracemalloc
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from rich.console import Console
from rich.table import Table

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV_VAR = "HULUD_GUARD_VERBOSE_BENCHMARK"


@dataclass
class PerformanceMetrics:
    """Timing and memory for one measured operation."""

    name: str
    execution_time: float
    memory_peak_mb: Optional[float] = None


class PerformanceMonitor:
    """Collects timings of named operations, optionally with peak memory."""

    def __init__(self, enable_memory_tracking: bool = False) -> None:
        self.metrics: List[PerformanceMetrics] = []
        self.enable_memory_tracking = enable_memory_tracking

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Context manager for measuring an operation.

        Args:
            name: Name of the operation being measured
        """
        started_tracing = False
        if self.enable_memory_tracking and not tracemalloc.is_tracing():
            tracemalloc.start()
            started_tracing = True

        start_time = time.perf_counter()
        try:
            yield
        finally:
            execution_time = time.perf_counter() - start_time
            peak = None

            if self.enable_memory_tracking:
                peak = tracemalloc.get_traced_memory()[1] / 1024 / 1024
                if started_tracing:
                    tracemalloc.stop()

            self.metrics.append(PerformanceMetrics(name, execution_time, peak))

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.

        Returns:
            Dictionary with performance summary, empty if nothing was measured
        """
        if not self.metrics:
            return {}

        total_time = sum(m.execution_time for m in self.metrics)
        summary: Dict[str, Any] = {
            "total_executions": len(self.metrics),
            "total_time": total_time,
            "average_time": total_time / len(self.metrics),
            "metrics": self.metrics,
        }
        if self.enable_memory_tracking:
            summary["max_peak_memory"] = max(m.memory_peak_mb or 0.0 for m in self.metrics)
        return summary

    def print_summary(self, console: Optional[Console] = None) -> None:
        """Print performance summary as a table."""
        summary = self.get_summary()
        if not summary:
            return

        table = Table(title="Performance Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Time", style="green")

        for metric in summary["metrics"]:
            table.add_row(metric.name, f"{metric.execution_time:.4f}s")

        table.add_row("Total", f"{summary['total_time']:.4f}s")
        if "max_peak_memory" in summary:
            table.add_row("Max Peak Memory", f"{summary['max_peak_memory']:.2f} MB")

        (console or Console()).print(table)


def benchmark(func: F) -> F:
    """Log the run time of a function when HULUD_GUARD_VERBOSE_BENCHMARK is set."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        if os.environ.get(BENCHMARK_ENV_VAR):
            logging.getLogger("Performance").info(f"{func.__name__} took {elapsed:.4f} seconds")
        return result
    return wrapper  # type: ignore[return-value]
