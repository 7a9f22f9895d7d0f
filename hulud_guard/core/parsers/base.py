"""Base parser class and data models for dependency file parsing."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ...config import DEPENDENCY_FILES
from ..models import SourceType


@dataclass(frozen=True)
class PackageReference:
    """A package name with the version spec or installed version recorded for it."""

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate the reference."""
        if not self.name:
            raise ValueError("Package name cannot be empty")


@dataclass
class ParsedDependencies:
    """Container for package references parsed from one file."""

    source_type: SourceType
    references: List[PackageReference] = field(default_factory=list)
    source_file: Optional[Path] = None

    def add_reference(self, name: str, version: str) -> None:
        """Add a package reference to the collection.

        Args:
            name: Package name
            version: Version spec or installed version
        """
        self.references.append(PackageReference(name, version))


class BaseParser(ABC):
    """Abstract base class for dependency file parsers.

    A parser handles the recognized dependency files whose extension is in
    ``supported_extensions``.
    """

    def __init__(self) -> None:
        """Initialize the parser."""
        self.supported_extensions: List[str] = []
        self.source_type: SourceType = SourceType.MANIFEST
        self.parser_type: str = ""

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if parser can handle the file
        """
        return file_path.name in DEPENDENCY_FILES and file_path.suffix in self.supported_extensions

    @abstractmethod
    def parse(self, content: str, malicious_names: Sequence[str] = ()) -> ParsedDependencies:
        """Parse the text of a dependency file.

        Args:
            content: File content
            malicious_names: Flagged package names, for parsers that search for them

        Returns:
            Parsed package references
        """
        pass

    def read_file(self, file_path: Path) -> str:
        """Read a dependency file as UTF-8 text.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()

    def parse_file(self, file_path: Path, malicious_names: Sequence[str] = ()) -> ParsedDependencies:
        """Read and parse a dependency file.

        Args:
            file_path: Path to the file to parse
            malicious_names: Flagged package names

        Returns:
            Parsed package references
        """
        result = self.parse(self.read_file(file_path), malicious_names)
        result.source_file = file_path
        return result
