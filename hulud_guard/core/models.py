"""Data models for scan findings and results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple


class Severity(str, Enum):
    """Severity of a finding."""

    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class SourceType(str, Enum):
    """Kind of dependency file a finding came from."""

    MANIFEST = "manifest"
    LOCK_FILE = "lock-file"


@dataclass(frozen=True)
class Finding:
    """A malicious package reference found in a dependency file."""

    file: str
    package: str
    version: str
    source_type: SourceType
    severity: Severity
    message: str
    matched_malicious_versions: Tuple[str, ...] = ()
    all_known_malicious_versions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": self.file,
            "package": self.package,
            "version": self.version,
            "sourceType": self.source_type.value,
            "severity": self.severity.value,
            "message": self.message,
            "matchedMaliciousVersions": list(self.matched_malicious_versions),
            "allKnownMaliciousVersions": list(self.all_known_malicious_versions),
        }


@dataclass(frozen=True)
class ScanSummary:
    """Aggregate counters for a finished scan."""

    directories_scanned: int
    files_scanned: int
    malicious_packages_in_db: int
    malicious_versions_in_db: int
    findings_count: int
    critical_count: int
    warning_count: int
    info_count: int

    @classmethod
    def from_findings(
        cls,
        findings: Tuple[Finding, ...],
        directories_scanned: int,
        files_scanned: int,
        malicious_packages_in_db: int,
        malicious_versions_in_db: int,
    ) -> "ScanSummary":
        """Build a summary by counting the given findings.

        Args:
            findings: All findings of the scan
            directories_scanned: Number of directories listed
            files_scanned: Number of dependency files processed
            malicious_packages_in_db: Package names in the database
            malicious_versions_in_db: Known malicious versions in the database

        Returns:
            Summary for the scan
        """
        return cls(
            directories_scanned=directories_scanned,
            files_scanned=files_scanned,
            malicious_packages_in_db=malicious_packages_in_db,
            malicious_versions_in_db=malicious_versions_in_db,
            findings_count=len(findings),
            critical_count=sum(1 for f in findings if f.severity is Severity.CRITICAL),
            warning_count=sum(1 for f in findings if f.severity is Severity.WARNING),
            info_count=sum(1 for f in findings if f.severity is Severity.INFO),
        )

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "directoriesScanned": self.directories_scanned,
            "filesScanned": self.files_scanned,
            "maliciousPackagesInDb": self.malicious_packages_in_db,
            "maliciousVersionsInDb": self.malicious_versions_in_db,
            "findingsCount": self.findings_count,
            "criticalCount": self.critical_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
        }


@dataclass(frozen=True)
class ScanResult:
    """Summary and ordered findings of a scan."""

    summary: ScanSummary
    findings: Tuple[Finding, ...] = ()

    @property
    def has_critical(self) -> bool:
        return self.summary.critical_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.summary.warning_count > 0

    def by_severity(self, severity: Severity) -> List[Finding]:
        """Get findings of one severity, in scan order."""
        return [f for f in self.findings if f.severity is severity]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
        }


@dataclass(frozen=True)
class ProjectReport:
    """Findings collected for one project directory during a scan."""

    directory: Path
    findings: Tuple[Finding, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return not self.findings

    def by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self.findings if f.severity is severity]
