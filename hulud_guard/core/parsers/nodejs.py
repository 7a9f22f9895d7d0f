"""Node.js dependency file parsers."""

import json
import re
from typing import Any, Dict, List, Sequence, Tuple

from ...config import LOCK_VERSION_WINDOW
from ...utils.logging import get_logger
from ..models import SourceType
from .base import BaseParser, ParsedDependencies

# Merge order for manifest sections. Later sections override earlier ones,
# so peer wins over optional, optional over dev, and dev over direct.
DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)


class NodeJSManifestParser(BaseParser):
    """Parser for JSON dependency files (package.json, package-lock.json, npm-shrinkwrap.json)."""

    def __init__(self) -> None:
        """Initialize the manifest parser."""
        super().__init__()
        self.source_type = SourceType.MANIFEST
        self.parser_type = "manifest"
        self.supported_extensions = [".json"]
        self.logger = get_logger("NodeJSManifestParser")

    def parse(self, content: str, malicious_names: Sequence[str] = ()) -> ParsedDependencies:
        """Parse manifest text into package references.

        Args:
            content: JSON text of the manifest
            malicious_names: Unused, every declared dependency is returned

        Returns:
            Parsed package references
        """
        result = ParsedDependencies(source_type=self.source_type)

        for name, version_spec in self.parse_manifest(content).items():
            result.add_reference(name, version_spec)

        return result

    def parse_manifest(self, content: str) -> Dict[str, str]:
        """Extract package name to version spec pairs from manifest text.

        Malformed JSON, including documents nested too deeply to decode,
        yields an empty mapping instead of an error, so one corrupt manifest
        does not stop a scan.

        Args:
            content: JSON text of the manifest

        Returns:
            Merged mapping of package name to version spec
        """
        try:
            data = json.loads(content)
        # ValueError covers JSONDecodeError and oversized integer literals
        except (ValueError, TypeError, RecursionError) as e:
            self.logger.debug(f"Skipping malformed manifest: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.debug("Skipping manifest whose top level is not an object")
            return {}

        return self._merge_sections(data)

    def _merge_sections(self, data: Dict[str, Any]) -> Dict[str, str]:
        """Merge the dependency sections of a manifest in DEPENDENCY_SECTIONS order.

        Args:
            data: Parsed JSON data

        Returns:
            Mapping of package name to version spec
        """
        merged: Dict[str, str] = {}

        for section_name in DEPENDENCY_SECTIONS:
            section = data.get(section_name)
            if not isinstance(section, dict):
                continue

            for name, version_spec in section.items():
                # Lock file style entries hold objects rather than specs
                if not name or not isinstance(version_spec, str):
                    continue
                merged[name] = version_spec

        return merged


class NodeJSLockTextParser(BaseParser):
    """Pattern-based parser for lock files (yarn.lock, pnpm-lock.yaml).

    This does not understand any lock file format. It looks for a quoted
    package name and then for a ``version: "x.y.z"`` field shortly after it.
    Entries written without a colon, such as yarn v1 ``version "1.2.3"``
    lines, are not picked up.
    """

    def __init__(self, version_window: int = LOCK_VERSION_WINDOW) -> None:
        """Initialize the lock file parser.

        Args:
            version_window: Characters after a package name searched for its version
        """
        super().__init__()
        self.source_type = SourceType.LOCK_FILE
        self.parser_type = "lock"
        self.supported_extensions = [".lock", ".yaml"]
        self.version_window = version_window

    def parse(self, content: str, malicious_names: Sequence[str] = ()) -> ParsedDependencies:
        """Parse lock file text into references for flagged packages.

        Args:
            content: Raw lock file text
            malicious_names: Flagged package names to search for

        Returns:
            Parsed package references with installed versions
        """
        result = ParsedDependencies(source_type=self.source_type)

        for name, version in self.parse_lock_text(content, malicious_names):
            result.add_reference(name, version)

        return result

    def parse_lock_text(self, content: str, malicious_names: Sequence[str]) -> List[Tuple[str, str]]:
        """Find installed versions of flagged packages in lock file text.

        Args:
            content: Raw lock file text
            malicious_names: Package names to look for, in the order to report them

        Returns:
            (package name, installed version) pairs; names whose version cannot
            be found are left out
        """
        entries = []

        for name in malicious_names:
            quoted_name = self._quoted_name_pattern(name)
            if not re.search(quoted_name, content):
                continue

            match = re.search(
                quoted_name
                + r'[\s\S]{0,%d}version["\']?:\s*["\']([^"\']+)["\']' % self.version_window,
                content,
            )
            if match:
                entries.append((name, match.group(1)))

        return entries

    @staticmethod
    def _quoted_name_pattern(name: str) -> str:
        return r'["\']' + re.escape(name) + r'["\']'
