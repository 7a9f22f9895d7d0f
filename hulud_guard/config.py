"""Scan configuration for hulud-guard."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

from .exceptions import ConfigError

# Dependency files the scanner opens. Any other file is ignored.
DEPENDENCY_FILES = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "npm-shrinkwrap.json",
)

DEFAULT_EXCLUDE_DIRS: FrozenSet[str] = frozenset(
    {"node_modules", ".git", ".cache", "dist", "build"}
)

OUTPUT_FORMATS = ("console", "json")

# Characters searched after a package name in a lock file for its version.
LOCK_VERSION_WINDOW = 200


@dataclass
class ScanConfig:
    """Configuration for a single scan run."""

    scan_path: Path = field(default_factory=Path.cwd)
    exclude_dirs: FrozenSet[str] = DEFAULT_EXCLUDE_DIRS
    verbose: bool = False
    output_format: str = "console"
    stream_output: bool = True
    lock_version_window: int = LOCK_VERSION_WINDOW

    def __post_init__(self) -> None:
        """Validate and normalize configuration."""
        self.scan_path = Path(os.path.abspath(self.scan_path))
        self.exclude_dirs = frozenset(self.exclude_dirs)

        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown output format '{self.output_format}'. "
                f"Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )

        if any(not name or not name.strip() for name in self.exclude_dirs):
            raise ConfigError("Excluded directory names cannot be empty")

        if self.lock_version_window <= 0:
            raise ConfigError("Lock file version window must be a positive number")

        # JSON output is a single document, never interleaved with progress
        if self.output_format == "json":
            self.stream_output = False

    @classmethod
    def from_options(
        cls,
        scan_path: Optional[Union[str, Path]] = None,
        exclude: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
    ) -> "ScanConfig":
        """Build a configuration from raw command line values.

        Args:
            scan_path: Root directory to scan, defaults to the working directory
            exclude: Comma-separated directory names replacing the defaults
            verbose: Enable verbose logging
            json_output: Emit JSON instead of console output

        Returns:
            Validated scan configuration
        """
        return cls(
            scan_path=Path(scan_path) if scan_path is not None else Path.cwd(),
            exclude_dirs=parse_exclude_dirs(exclude) if exclude is not None else DEFAULT_EXCLUDE_DIRS,
            verbose=verbose,
            output_format="json" if json_output else "console",
        )


def parse_exclude_dirs(value: Union[str, Iterable[str]]) -> FrozenSet[str]:
    """Parse a comma-separated list of directory names.

    Args:
        value: Comma-separated string or an iterable of names

    Returns:
        Set of stripped, non-empty names

    Raises:
        ConfigError: If no names remain after parsing
    """
    parts = value.split(",") if isinstance(value, str) else list(value)
    names = frozenset(part.strip() for part in parts if part and part.strip())

    if not names:
        raise ConfigError("--exclude requires a comma-separated list of directories")

    return names
