"""Version range matching and severity classification for hulud-guard."""

import re
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Tuple

from ..database import MaliciousDatabase
from ..utils.logging import get_logger
from .models import Finding, Severity, SourceType

VERSION_PATTERN = re.compile(r'(\d+)\.(\d+)\.(\d+)')
RANGE_PREFIX_PATTERN = re.compile(r'^[\^~]')


class SemVer(NamedTuple):
    """The numeric major.minor.patch part of a version."""

    major: int
    minor: int
    patch: int


def parse_version(version_string: str) -> Optional[SemVer]:
    """Extract the first major.minor.patch triple from a string.

    Anything around the triple, such as pre-release tags or a fourth
    component, is ignored.

    Args:
        version_string: Version or version spec

    Returns:
        Parsed triple or None if the string has no triple
    """
    if not isinstance(version_string, str):
        return None

    match = VERSION_PATTERN.search(version_string)
    if not match:
        return None

    return SemVer(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def range_satisfied_by(range_spec: str, candidate_version: str) -> bool:
    """Check whether a version range spec could resolve to a version.

    Supports caret (``^``), tilde (``~``) and exact specs. Specs that cannot
    be parsed never match.

    Args:
        range_spec: Version spec from a manifest, e.g. ``^1.2.0``
        candidate_version: Concrete version to test, e.g. ``1.2.3``

    Returns:
        True if the spec allows the candidate version
    """
    if not isinstance(range_spec, str) or not isinstance(candidate_version, str):
        return False

    range_spec = range_spec.strip()
    candidate_version = candidate_version.strip()

    if range_spec == candidate_version:
        return True

    base = parse_version(RANGE_PREFIX_PATTERN.sub('', range_spec))
    target = parse_version(candidate_version)

    if base is None or target is None:
        return False

    if range_spec.startswith('^'):
        if base.major == 0:
            if base.minor == 0:
                return target == base
            return target.major == 0 and target.minor == base.minor and target.patch >= base.patch
        return target.major == base.major and (
            target.minor > base.minor
            or (target.minor == base.minor and target.patch >= base.patch)
        )

    if range_spec.startswith('~'):
        return (
            target.major == base.major
            and target.minor == base.minor
            and target.patch >= base.patch
        )

    return target == base


def installed_version_matches(installed_version: str, malicious_version: str) -> bool:
    """Check whether an installed (resolved) version is a given version.

    Lock files record concrete versions, so there are no range semantics here.
    """
    if not isinstance(installed_version, str) or not isinstance(malicious_version, str):
        return False

    installed_version = installed_version.strip()
    malicious_version = malicious_version.strip()

    if installed_version == malicious_version:
        return True

    installed = parse_version(installed_version)
    return installed is not None and installed == parse_version(malicious_version)


@dataclass(frozen=True)
class VersionCheck:
    """Result of testing a version against a package's malicious versions."""

    matched_versions: Tuple[str, ...]
    all_malicious_versions: Tuple[str, ...]

    @property
    def matches(self) -> bool:
        return bool(self.matched_versions)


class MaliciousPackageMatcher:
    """Classifies package references against the malicious package database."""

    def __init__(self, database: MaliciousDatabase) -> None:
        """Initialize the matcher.

        Args:
            database: Malicious package database to match against
        """
        self.database = database
        self.logger = get_logger("MaliciousPackageMatcher")

    def check_version(
        self,
        package_name: str,
        version: str,
        predicate: Callable[[str, str], bool] = range_satisfied_by,
    ) -> VersionCheck:
        """Test a version or spec against every known malicious version.

        Args:
            package_name: Package to look up
            version: Version spec or installed version
            predicate: Comparison applied to (version, malicious_version)

        Returns:
            Matched and known malicious versions, in database order
        """
        known = self.database.known_versions(package_name)
        matched = tuple(v for v in known if predicate(version, v))
        return VersionCheck(matched_versions=matched, all_malicious_versions=known)

    def match_manifest_dependency(
        self,
        file_path: str,
        package_name: str,
        version_spec: str,
    ) -> Optional[Finding]:
        """Classify a dependency declared in a manifest.

        Args:
            file_path: Absolute path of the manifest
            package_name: Declared package name
            version_spec: Declared version range

        Returns:
            Finding if the package is flagged, None otherwise
        """
        if not self.database.is_malicious(package_name):
            return None

        check = self.check_version(package_name, version_spec)

        if check.matches:
            severity = Severity.CRITICAL
            message = (
                f"Version range '{version_spec}' could install malicious version(s): "
                f"{', '.join(check.matched_versions)}"
            )
        elif check.all_malicious_versions:
            severity = Severity.WARNING
            message = (
                f"Version '{version_spec}' appears safe. "
                f"Known malicious: {', '.join(check.all_malicious_versions)}"
            )
        else:
            severity = Severity.INFO
            message = "Package name matches malicious list"

        self.logger.debug(f"{severity.value}: {package_name}@{version_spec} in {file_path}")

        return Finding(
            file=file_path,
            package=package_name,
            version=version_spec,
            source_type=SourceType.MANIFEST,
            severity=severity,
            message=message,
            matched_malicious_versions=check.matched_versions,
            all_known_malicious_versions=check.all_malicious_versions,
        )

    def match_lock_entry(
        self,
        file_path: str,
        package_name: str,
        installed_version: str,
    ) -> Finding:
        """Classify a flagged package resolved in a lock file.

        Every lock file hit is at least a WARNING, since the package is
        actually installed.

        Args:
            file_path: Absolute path of the lock file
            package_name: Flagged package name
            installed_version: Version recorded in the lock file

        Returns:
            Finding for the lock file entry
        """
        check = self.check_version(package_name, installed_version, installed_version_matches)

        severity = Severity.WARNING
        message = f"Package found in lock file with version {installed_version}"

        if check.matches:
            severity = Severity.CRITICAL
            message = f"CONFIRMED MALICIOUS version installed: {installed_version}"
        elif check.all_malicious_versions:
            message = (
                f"Installed version {installed_version} appears safe. "
                f"Known malicious: {', '.join(check.all_malicious_versions)}"
            )

        self.logger.debug(f"{severity.value}: {package_name}@{installed_version} in {file_path}")

        return Finding(
            file=file_path,
            package=package_name,
            version=installed_version,
            source_type=SourceType.LOCK_FILE,
            severity=severity,
            message=message,
            matched_malicious_versions=check.matched_versions,
            all_known_malicious_versions=check.all_malicious_versions,
        )
