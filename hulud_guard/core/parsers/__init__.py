"""Dependency file parsers for npm projects."""

from ...config import LOCK_VERSION_WINDOW
from .base import BaseParser, PackageReference, ParsedDependencies
from .nodejs import NodeJSLockTextParser, NodeJSManifestParser
from .registry import ParserRegistry


def build_registry(lock_version_window: int = LOCK_VERSION_WINDOW) -> ParserRegistry:
    """Create a registry with the built-in parsers.

    Args:
        lock_version_window: Version search window for the lock file parser

    Returns:
        Registry with manifest and lock file parsers
    """
    registry = ParserRegistry()
    registry.register("manifest", NodeJSManifestParser())
    registry.register("lock", NodeJSLockTextParser(lock_version_window))
    return registry


# Registry with default settings
DependencyParser = build_registry()

__all__ = [
    "BaseParser",
    "PackageReference",
    "ParsedDependencies",
    "NodeJSManifestParser",
    "NodeJSLockTextParser",
    "ParserRegistry",
    "DependencyParser",
    "build_registry",
]
