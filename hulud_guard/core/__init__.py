"""Core parsing, version matching and scanning logic for hulud-guard."""

from .matcher import MaliciousPackageMatcher, range_satisfied_by
from .models import Finding, ScanResult, ScanSummary, Severity, SourceType
from .parsers import DependencyParser, ParsedDependencies
from .scanner import ScanEngine

__all__ = [
    "MaliciousPackageMatcher",
    "range_satisfied_by",
    "Finding",
    "ScanResult",
    "ScanSummary",
    "Severity",
    "SourceType",
    "DependencyParser",
    "ParsedDependencies",
    "ScanEngine",
]
