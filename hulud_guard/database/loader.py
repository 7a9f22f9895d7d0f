"""Loader for the static malicious package database."""

import gzip
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Tuple, Union

from ..exceptions import LoadError
from ..utils.logging import get_logger

NAMES_KEY = "packageNames"
VERSIONS_KEY = "packageVersions"

logger = get_logger("MaliciousDatabase")


@dataclass(frozen=True)
class MaliciousDatabase:
    """Known malicious package names and their malicious versions.

    ``package_names`` keeps source order so lock file scans are repeatable.
    ``package_versions`` may omit names that are flagged by name only.
    """

    package_names: Tuple[str, ...]
    package_versions: Mapping[str, Tuple[str, ...]]
    _name_index: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate database invariants and freeze the version mapping."""
        if not self.package_names:
            raise LoadError("Malicious package database contains no package names")

        if any(not name.strip() for name in self.package_names):
            raise LoadError("Malicious package database contains an empty package name")

        name_index = frozenset(self.package_names)
        unknown = [name for name in self.package_versions if name not in name_index]
        if unknown:
            raise LoadError(
                f"Versions listed for packages missing from {NAMES_KEY}: {', '.join(sorted(unknown))}"
            )

        object.__setattr__(self, "_name_index", name_index)
        object.__setattr__(
            self,
            "package_versions",
            MappingProxyType({name: tuple(versions) for name, versions in self.package_versions.items()}),
        )

    @property
    def package_count(self) -> int:
        return len(self.package_names)

    @property
    def version_count(self) -> int:
        return sum(len(versions) for versions in self.package_versions.values())

    def is_malicious(self, package_name: str) -> bool:
        """Check whether a package name is flagged."""
        return package_name in self._name_index

    def known_versions(self, package_name: str) -> Tuple[str, ...]:
        """Get the known malicious versions for a package, possibly empty."""
        return self.package_versions.get(package_name, ())

    def get_database_stats(self) -> Dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary with database statistics
        """
        return {
            "total_packages": self.package_count,
            "total_versions": self.version_count,
            "packages_with_versions": len(self.package_versions),
            "name_only_packages": self.package_count - len(self.package_versions),
        }


@dataclass
class DatabaseConfig:
    """Configuration for a database file on disk."""

    database_path: Path

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.database_path = Path(self.database_path)
        if not self.database_path.exists():
            raise LoadError(f"Database path does not exist: {self.database_path}", self.database_path)
        if not self.database_path.is_file():
            raise LoadError(f"Database path is not a file: {self.database_path}", self.database_path)


def load_database(source: Union[str, Path, DatabaseConfig, Mapping[str, Any]]) -> MaliciousDatabase:
    """Load the malicious package database.

    Args:
        source: Path to a JSON (optionally gzip-compressed) database file, a
            DatabaseConfig, or an already parsed mapping

    Returns:
        Immutable malicious package database

    Raises:
        LoadError: If the source cannot be read or lacks the required mappings
    """
    if isinstance(source, Mapping):
        return _build_database(source, "<mapping>")

    if isinstance(source, DatabaseConfig):
        config = source
    elif isinstance(source, (str, os.PathLike)):
        config = DatabaseConfig(Path(source))
    else:
        raise LoadError(
            f"Database source must be a mapping or a file path, not {type(source).__name__}"
        )

    data = _read_database_file(config.database_path)
    database = _build_database(data, config.database_path)

    logger.debug(
        f"Loaded {database.package_count} packages and {database.version_count} "
        f"versions from {config.database_path}"
    )
    return database


def _read_database_file(path: Path) -> Any:
    """Read and decode a database file.

    Args:
        path: Path to a .json or .json.gz file

    Returns:
        Decoded JSON document
    """
    try:
        if path.suffix == ".gz":
            with gzip.open(path, "rt", encoding="utf-8") as f:
                return json.load(f)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(f"Failed to parse malicious packages database {path}: {e}", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Failed to read malicious packages database {path}: {e}", path) from e


def _build_database(data: Any, source: Union[str, Path]) -> MaliciousDatabase:
    """Validate raw database data and build a MaliciousDatabase.

    Args:
        data: Decoded database document
        source: Origin of the data, used in error messages

    Returns:
        Validated database
    """
    if not isinstance(data, Mapping):
        raise LoadError(f"Database {source} must be a JSON object", source)

    if NAMES_KEY not in data or VERSIONS_KEY not in data:
        raise LoadError(
            f"Database {source} must define both '{NAMES_KEY}' and '{VERSIONS_KEY}'", source
        )

    raw_names = data[NAMES_KEY]
    raw_versions = data[VERSIONS_KEY]

    if not isinstance(raw_names, list) or not all(isinstance(name, str) for name in raw_names):
        raise LoadError(f"'{NAMES_KEY}' in {source} must be a list of strings", source)

    if not isinstance(raw_versions, Mapping):
        raise LoadError(f"'{VERSIONS_KEY}' in {source} must be an object", source)

    versions: Dict[str, List[str]] = {}
    for name, entries in raw_versions.items():
        if not isinstance(entries, list) or not all(isinstance(v, str) for v in entries):
            raise LoadError(f"Versions for '{name}' in {source} must be a list of strings", source)
        versions[name] = entries

    # dict.fromkeys drops duplicates but keeps first-seen order
    names = tuple(dict.fromkeys(raw_names))

    try:
        return MaliciousDatabase(package_names=names, package_versions=versions)
    except LoadError as e:
        raise LoadError(f"Invalid database {source}: {e}", source) from e
