"""Utility functions and helpers for hulud-guard."""

from .logging import setup_logging, get_logger
from .performance import PerformanceMonitor, benchmark
from .path_utils import list_directory, is_dependency_file, is_excluded_dir

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceMonitor",
    "benchmark",
    "list_directory",
    "is_dependency_file",
    "is_excluded_dir",
]
