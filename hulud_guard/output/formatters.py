"""Output formatters for hulud-guard results."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.models import Finding, ProjectReport, ScanResult, Severity
from ..utils.logging import get_logger

# Informational findings are only listed when there are fewer than this many
MAX_INFO_LISTED = 10

CRITICAL_ACTIONS = [
    "DO NOT run npm install/update",
    "Check lock files for actual installed versions",
    "If malicious versions are installed: disconnect from the network, remove the "
    "malicious packages, rotate ALL credentials and check for unauthorized access",
    "Pin safe versions (remove ^ and ~ prefixes)",
    "Update to latest safe versions",
]

WARNING_ACTIONS = [
    "Verify installed versions in lock files",
    "Avoid running npm install without checking first",
    "Pin versions to prevent future issues",
    "Monitor package maintainer announcements",
]


def group_by_package(findings: List[Finding]) -> Dict[str, List[Finding]]:
    """Group findings by package name, keeping first-seen order."""
    grouped: Dict[str, List[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.package, []).append(finding)
    return grouped


class ConsoleFormatter:
    """Rich console formatter for hulud-guard output."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
            verbose: Show warning details in per-project output
        """
        self.console = console or Console()
        self.verbose = verbose

    def format_scan_start(self, path: Path) -> None:
        """Announce the start of a scan."""
        self.console.print(f"Starting scan: {escape(str(path))}")

    def format_project(self, report: ProjectReport) -> None:
        """Display the findings of one project as the scan leaves it.

        Args:
            report: Project directory and its findings
        """
        self.console.print(f"\n[bold]Scanning project:[/bold] {escape(str(report.directory))}")

        if report.is_clean:
            self.console.print("   [green]Clean - No issues found[/green]")
            return

        critical = report.by_severity(Severity.CRITICAL)
        warnings = report.by_severity(Severity.WARNING)

        if critical:
            self.console.print(f"   [red bold]CRITICAL: {len(critical)} issue(s) found[/red bold]")
            for finding in critical:
                self._print_finding_line(finding, "red")

        if warnings:
            self.console.print(f"   [yellow]WARNING: {len(warnings)} issue(s) found[/yellow]")
            if self.verbose:
                for finding in warnings:
                    self._print_finding_line(finding, "yellow")

    def _print_finding_line(self, finding: Finding, style: str) -> None:
        self.console.print(f"      [{style}]{escape(finding.package)}@{escape(finding.version)}[/{style}]")
        self.console.print(f"         {escape(finding.message)}")

    def format_scan_results(self, result: ScanResult) -> None:
        """Format and display the full scan report.

        Args:
            result: Finished scan result
        """
        self.console.print(self._create_summary_panel(result))

        if not result.findings:
            self.console.print(Panel("CLEAN: No malicious packages detected!", style="green"))
            return

        critical = result.by_severity(Severity.CRITICAL)
        warnings = result.by_severity(Severity.WARNING)
        info = result.by_severity(Severity.INFO)

        if critical:
            self.console.print(f"\n[red bold]CRITICAL ISSUES FOUND! {len(critical)} critical issue(s) detected:[/red bold]\n")
            for package, items in group_by_package(critical).items():
                self.console.print(f"[red bold]{escape(package)}[/red bold]")
                for item in items:
                    self.console.print(f"   File: {escape(item.file)}")
                    self.console.print(f"   {escape(item.message)}")
                    if item.matched_malicious_versions:
                        self.console.print(
                            f"   Could install: {escape(', '.join(item.matched_malicious_versions))}"
                        )
                self.console.print("")

        if warnings:
            self.console.print(f"\n[yellow]{len(warnings)} warning(s) found:[/yellow]\n")
            for package, items in group_by_package(warnings).items():
                self.console.print(f"[yellow]{escape(package)}[/yellow]")
                if items[0].all_known_malicious_versions:
                    self.console.print(
                        f"   Known malicious: {escape(', '.join(items[0].all_known_malicious_versions))}"
                    )
                for item in items:
                    self.console.print(f"   File: {escape(item.file)}")
                    self.console.print(f"   {escape(item.message)}")
                self.console.print("")

        if info and len(info) < MAX_INFO_LISTED:
            self.console.print(f"\n[cyan]{len(info)} informational finding(s):[/cyan]\n")
            for package, items in group_by_package(info).items():
                self.console.print(f"   {escape(package)} ({len(items)} location(s))")
            self.console.print("")

        self._print_recommendations(critical, warnings)

    def _create_summary_panel(self, result: ScanResult) -> Panel:
        """Create summary panel.

        Args:
            result: Scan result

        Returns:
            Rich panel with summary counts
        """
        summary = result.summary

        if result.has_critical:
            style = "red"
        elif result.findings:
            style = "yellow"
        else:
            style = "green"

        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan")
        table.add_column()
        table.add_row("Directories scanned", str(summary.directories_scanned))
        table.add_row("Files scanned", str(summary.files_scanned))
        table.add_row("Malicious packages in database", str(summary.malicious_packages_in_db))
        table.add_row("Known malicious versions", str(summary.malicious_versions_in_db))
        table.add_row("Critical", str(summary.critical_count))
        table.add_row("Warnings", str(summary.warning_count))
        table.add_row("Info", str(summary.info_count))

        return Panel(table, title="Malicious Package Scan Results", style=style)

    def _print_recommendations(self, critical: List[Finding], warnings: List[Finding]) -> None:
        """Print recommended actions for the findings."""
        self.console.print("[bold]RECOMMENDED ACTIONS:[/bold]\n")

        if critical:
            self.console.print("[red bold]CRITICAL - IMMEDIATE ACTION REQUIRED:[/red bold]")
            for i, action in enumerate(CRITICAL_ACTIONS, 1):
                self.console.print(f"   {i}. {action}")
            self.console.print("")

        if warnings:
            self.console.print("[yellow]WARNING - VERIFICATION NEEDED:[/yellow]")
            for i, action in enumerate(WARNING_ACTIONS, 1):
                self.console.print(f"   {i}. {action}")
            self.console.print("")

        self.console.print("[dim]TIP: Lock files show actual installed versions[/dim]")

    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display error message.

        Args:
            error: Error message
            details: Optional error details
        """
        content = f"[bold red]Error:[/bold red] {escape(error)}"
        if details:
            content += f"\n\n[dim]{escape(details)}[/dim]"

        self.console.print(Panel(content, style="red"))


class JSONFormatter:
    """JSON formatter for hulud-guard output."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_scan_results(self, result: ScanResult) -> Dict[str, Any]:
        """Format scan results as a JSON-ready dictionary."""
        return result.to_dict()

    def dumps(self, result: ScanResult) -> str:
        """Serialize scan results as indented JSON text."""
        return json.dumps(self.format_scan_results(result), indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.debug(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
