"""Registry that dispatches dependency files to parsers."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .base import BaseParser, ParsedDependencies


class ParserRegistry:
    """Registry of dependency file parsers, keyed by parser type."""

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[str, BaseParser] = {}

    def register(self, parser_type: str, parser: BaseParser) -> None:
        """Register a parser.

        Args:
            parser_type: Parser type (e.g., 'manifest', 'lock')
            parser: Parser instance to register
        """
        self._parsers[parser_type] = parser

    def find_parser_for_file(self, file_path: Path) -> Optional[BaseParser]:
        """Find a parser that can handle the given file.

        Args:
            file_path: Path to the file

        Returns:
            Parser that can handle the file or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(file_path):
                return parser
        return None

    def get_supported_parser_types(self) -> List[str]:
        """Get list of registered parser types."""
        return list(self._parsers.keys())

    def parse_file(self, file_path: Path, malicious_names: Sequence[str] = ()) -> Optional[ParsedDependencies]:
        """Parse a file using the appropriate parser.

        Args:
            file_path: Path to the file to parse
            malicious_names: Flagged package names, used by lock file parsers

        Returns:
            Parsed dependencies or None if no parser handles the file

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        parser = self.find_parser_for_file(file_path)
        if parser:
            return parser.parse_file(file_path, malicious_names)
        return None
