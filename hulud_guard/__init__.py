"""hulud-guard - scan npm projects for dependencies on known malicious package versions."""

__version__ = "0.1.0"

from .config import ScanConfig
from .core.matcher import MaliciousPackageMatcher, range_satisfied_by
from .core.models import Finding, ScanResult, ScanSummary, Severity, SourceType
from .core.scanner import ScanEngine
from .database import MaliciousDatabase, load_database
from .exceptions import ConfigError, HuludGuardError, LoadError, PathNotFoundError, UnreadableRootError
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "ScanConfig",
    "MaliciousPackageMatcher",
    "range_satisfied_by",
    "Finding",
    "ScanResult",
    "ScanSummary",
    "Severity",
    "SourceType",
    "ScanEngine",
    "MaliciousDatabase",
    "load_database",
    "ConfigError",
    "HuludGuardError",
    "LoadError",
    "PathNotFoundError",
    "UnreadableRootError",
    "ConsoleFormatter",
    "JSONFormatter",
]
