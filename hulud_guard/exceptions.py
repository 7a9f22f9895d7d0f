"""Exceptions raised by hulud-guard.

Only these errors abort a run. Problems with a single directory or file are
handled inside the scanner and never surface here.
"""

from pathlib import Path
from typing import Optional, Union


class HuludGuardError(Exception):
    """Base class for fatal hulud-guard errors."""

    pass


class ConfigError(HuludGuardError):
    """Raised when command line or configuration input is invalid."""

    pass


class LoadError(HuludGuardError):
    """Raised when the malicious package database cannot be loaded.

    Attributes:
        source: Path or description of the database source that failed
    """

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.source = source


class PathNotFoundError(HuludGuardError):
    """Raised when the scan root does not exist."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(f"Scan path not found: {path}")
        self.path = path


class UnreadableRootError(HuludGuardError):
    """Raised when the scan root exists but cannot be listed as a directory."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Cannot scan {path}: {reason}")
        self.path = path
