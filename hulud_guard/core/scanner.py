"""Directory scanner that turns dependency files into findings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..config import ScanConfig
from ..database import MaliciousDatabase
from ..exceptions import PathNotFoundError, UnreadableRootError
from ..utils.logging import get_logger
from ..utils.path_utils import DirectoryListing, is_dependency_file, is_excluded_dir, is_manifest_file, list_directory
from ..utils.performance import PerformanceMonitor, benchmark
from .matcher import MaliciousPackageMatcher
from .models import Finding, ProjectReport, ScanResult, ScanSummary, SourceType
from .parsers import ParsedDependencies, build_registry

ProjectCallback = Callable[[ProjectReport], None]


@dataclass
class ScanContext:
    """Mutable state of one scan run.

    Each call to ScanEngine.scan gets a fresh context, so an engine can be
    reused and several engines can run in the same process.
    """

    directories_scanned: int = 0
    files_scanned: int = 0
    findings: List[Finding] = field(default_factory=list)
    current_project: Optional[Path] = None
    project_findings: List[Finding] = field(default_factory=list)


class ScanEngine:
    """Walks a directory tree and reports references to malicious packages."""

    def __init__(
        self,
        config: ScanConfig,
        database: MaliciousDatabase,
        on_project: Optional[ProjectCallback] = None,
        performance_monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        """Initialize the scan engine.

        Args:
            config: Scan configuration
            database: Malicious package database
            on_project: Called with each project's findings as the scan
                leaves it, only used when ``config.stream_output`` is set
            performance_monitor: Optional monitor that times the scan
        """
        self.config = config
        self.database = database
        self.on_project = on_project
        self.performance_monitor = performance_monitor or PerformanceMonitor()
        self.matcher = MaliciousPackageMatcher(database)
        self.registry = build_registry(config.lock_version_window)
        self.logger = get_logger("ScanEngine")

    @benchmark
    def scan(self) -> ScanResult:
        """Scan the configured root directory.

        Returns:
            Summary and findings in depth-first traversal order

        Raises:
            PathNotFoundError: If the scan root does not exist
            UnreadableRootError: If the scan root is not a directory or cannot be listed
        """
        root = self.config.scan_path
        if not root.exists():
            raise PathNotFoundError(root)

        try:
            listing = list_directory(root)
        except OSError as e:
            raise UnreadableRootError(root, e.strerror or str(e)) from e

        self.logger.debug(f"Scanning: {root}")
        context = ScanContext()

        with self.performance_monitor.measure("scan"):
            self._visit_listing(listing, context)

        if context.current_project is not None:
            self._finish_project(context)

        findings = tuple(context.findings)
        summary = ScanSummary.from_findings(
            findings,
            directories_scanned=context.directories_scanned,
            files_scanned=context.files_scanned,
            malicious_packages_in_db=self.database.package_count,
            malicious_versions_in_db=self.database.version_count,
        )
        return ScanResult(summary=summary, findings=findings)

    def _walk_directory(self, directory: Path, context: ScanContext) -> None:
        """List a subdirectory and visit it, skipping it if it cannot be read.

        Args:
            directory: Directory to visit
            context: State of the current scan
        """
        try:
            listing = list_directory(directory)
        except OSError as e:
            self._warn(f"Cannot read directory {directory}: {e}")
            return

        self._visit_listing(listing, context)

    def _visit_listing(self, listing: DirectoryListing, context: ScanContext) -> None:
        """Scan the files of a listed directory and recurse into its subdirectories."""
        context.directories_scanned += 1

        # package.json opens the project, so it goes before the lock files
        # that belong to it, and files go before subdirectories
        for file_path in sorted(listing.files, key=lambda p: (not is_manifest_file(p), p.name)):
            if is_dependency_file(file_path):
                self._scan_file(file_path, context)

        for subdirectory in listing.directories:
            if is_excluded_dir(subdirectory, self.config.exclude_dirs):
                continue
            self._walk_directory(subdirectory, context)

    def _scan_file(self, file_path: Path, context: ScanContext) -> None:
        """Parse one dependency file and record its findings.

        Args:
            file_path: Recognized dependency file
            context: State of the current scan
        """
        context.files_scanned += 1

        if is_manifest_file(file_path) and file_path.parent != context.current_project:
            if context.current_project is not None:
                self._finish_project(context)
            context.current_project = file_path.parent
            context.project_findings = []

        try:
            parsed = self.registry.parse_file(file_path, self.database.package_names)
        except (OSError, UnicodeDecodeError) as e:
            self._warn(f"Cannot read file {file_path}: {e}")
            return

        if parsed is None:
            return

        new_findings = self._classify(parsed, str(file_path))
        context.findings.extend(new_findings)
        context.project_findings.extend(new_findings)

    def _classify(self, parsed: ParsedDependencies, file_path: str) -> List[Finding]:
        """Turn parsed references into findings.

        Args:
            parsed: References from one file
            file_path: Absolute path recorded on each finding

        Returns:
            Findings in reference order
        """
        findings = []

        for ref in parsed.references:
            if parsed.source_type is SourceType.LOCK_FILE:
                findings.append(self.matcher.match_lock_entry(file_path, ref.name, ref.version))
            else:
                finding = self.matcher.match_manifest_dependency(file_path, ref.name, ref.version)
                if finding is not None:
                    findings.append(finding)

        return findings

    def _finish_project(self, context: ScanContext) -> None:
        """Hand the current project's findings to the project callback."""
        if self.on_project is None or not self.config.stream_output:
            return

        self.on_project(ProjectReport(
            directory=context.current_project,
            findings=tuple(context.project_findings),
        ))

    def _warn(self, message: str) -> None:
        if self.config.verbose:
            self.logger.warning(message)
        else:
            self.logger.debug(message)
