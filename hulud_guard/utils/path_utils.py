"""Path utilities for walking project trees and filtering entries."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, List

from ..config import DEPENDENCY_FILES

MANIFEST_FILE = "package.json"


@dataclass
class DirectoryListing:
    """Subdirectories and files of one directory, sorted by name.

    Symbolic links are left out of both lists so a walk never follows them.
    """

    path: Path
    directories: List[Path] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)


def list_directory(path: Path) -> DirectoryListing:
    """List a directory without following symbolic links.

    Args:
        path: Directory to list

    Returns:
        Sorted listing of the directory

    Raises:
        OSError: If the directory cannot be read
    """
    listing = DirectoryListing(path=path)

    with os.scandir(path) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                listing.directories.append(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                listing.files.append(Path(entry.path))

    return listing


def is_excluded_dir(path: Path, exclude_dirs: AbstractSet[str]) -> bool:
    """Check a directory name against the exclusion set.

    Matching is on the name only, so an excluded name is pruned at any depth.
    """
    return path.name in exclude_dirs


def is_dependency_file(path: Path) -> bool:
    """Check if a file is one of the recognized dependency files."""
    return path.name in DEPENDENCY_FILES


def is_manifest_file(path: Path) -> bool:
    """Check if a file starts a new project (a package.json)."""
    return path.name == MANIFEST_FILE
