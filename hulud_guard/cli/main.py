"""Main CLI interface for hulud-guard."""

import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config import DEFAULT_EXCLUDE_DIRS, DEPENDENCY_FILES, ScanConfig
from ..core.matcher import MaliciousPackageMatcher
from ..core.models import ScanResult, Severity
from ..core.parsers import DependencyParser
from ..core.scanner import ScanEngine
from ..database import MaliciousDatabase, load_database
from ..exceptions import ConfigError, HuludGuardError
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import get_logger, setup_logging
from ..utils.performance import PerformanceMonitor

EXIT_CLEAN = 0
EXIT_WARNINGS = 1
EXIT_CRITICAL = 2
EXIT_ERROR = 3

DATABASE_ENV_VAR = "HULUD_GUARD_DATABASE"

# Base of the usage errors typer raises, taken from typer itself since it may
# bundle its own copy of click
CLICK_ERROR = next(cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "ClickException")

app = typer.Typer(
    name="hulud-guard",
    help="Scan npm projects for dependencies on known malicious package versions",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger("CLI")


def determine_exit_code(result: ScanResult) -> int:
    """Map a scan result to the process exit code.

    Args:
        result: Finished scan result

    Returns:
        2 if anything is critical, 1 if there are only warnings, else 0
    """
    if result.has_critical:
        return EXIT_CRITICAL
    if result.has_warnings:
        return EXIT_WARNINGS
    return EXIT_CLEAN


def _load_database(database_path: Optional[Path]) -> MaliciousDatabase:
    if database_path is None:
        raise ConfigError(
            f"No malicious package database given. Use --database or set {DATABASE_ENV_VAR}"
        )
    return load_database(database_path)


def _fail(error: Exception) -> NoReturn:
    """Print a fatal error and exit with the error code."""
    logger.debug(f"Fatal error: {error!r}")
    ConsoleFormatter(err_console).format_error(str(error))
    raise typer.Exit(EXIT_ERROR)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"hulud-guard {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version number and exit"
    )
) -> None:
    """Scan npm projects for dependencies on known malicious package versions."""


@app.command()
def scan(
    path: Optional[Path] = typer.Argument(
        None,
        help="Directory to scan (default: current directory)"
    ),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        envvar=DATABASE_ENV_VAR,
        help="Path to the malicious package database (JSON or JSON.gz)"
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude",
        help="Comma-separated directories to exclude (default: node_modules,.git,.cache,dist,build)"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results in JSON format"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write JSON results to this file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed scanning progress"
    ),
    performance: bool = typer.Option(
        False,
        "--performance",
        help="Show performance summary"
    ),
) -> None:
    """Scan a directory tree for malicious npm packages."""
    setup_logging(verbose=verbose)

    try:
        config = ScanConfig.from_options(path, exclude, verbose, json_output)
        database = _load_database(database_path)
    except HuludGuardError as e:
        _fail(e)

    formatter = ConsoleFormatter(console, verbose=verbose)
    monitor = PerformanceMonitor()

    if config.stream_output:
        formatter.format_scan_start(config.scan_path)

    engine = ScanEngine(
        config,
        database,
        on_project=formatter.format_project,
        performance_monitor=monitor,
    )

    try:
        result = engine.scan()
    except HuludGuardError as e:
        _fail(e)

    if config.output_format == "json":
        typer.echo(JSONFormatter().dumps(result))
    else:
        formatter.format_scan_results(result)

    if output:
        json_formatter = JSONFormatter(output)
        try:
            json_formatter.save_results(json_formatter.format_scan_results(result))
        except OSError as e:
            _fail(e)

    if performance:
        monitor.print_summary(err_console if json_output else console)

    raise typer.Exit(determine_exit_code(result))


@app.command()
def check(
    package: str = typer.Argument(..., help="Package name"),
    spec: str = typer.Argument(..., help="Version spec (e.g. ^1.2.0) or installed version"),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        envvar=DATABASE_ENV_VAR,
        help="Path to the malicious package database (JSON or JSON.gz)"
    ),
    installed: bool = typer.Option(
        False,
        "--installed",
        help="Treat SPEC as an exact installed version, as found in a lock file"
    ),
) -> None:
    """Check a single package version spec against the database."""
    try:
        database = _load_database(database_path)
    except HuludGuardError as e:
        _fail(e)

    if not database.is_malicious(package):
        console.print(f"[green]{escape(package)} is not in the malicious package database[/green]")
        raise typer.Exit(EXIT_CLEAN)

    matcher = MaliciousPackageMatcher(database)
    if installed:
        finding = matcher.match_lock_entry("<command line>", package, spec)
    else:
        finding = matcher.match_manifest_dependency("<command line>", package, spec)

    styles = {Severity.CRITICAL: "red bold", Severity.WARNING: "yellow", Severity.INFO: "cyan"}
    style = styles[finding.severity]
    console.print(f"[{style}]{finding.severity.value}[/{style}] {escape(package)}@{escape(spec)}")
    console.print(f"   {escape(finding.message)}")

    if finding.severity is Severity.CRITICAL:
        raise typer.Exit(EXIT_CRITICAL)
    if finding.severity is Severity.WARNING:
        raise typer.Exit(EXIT_WARNINGS)
    raise typer.Exit(EXIT_CLEAN)


@app.command()
def info(
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        envvar=DATABASE_ENV_VAR,
        help="Path to the malicious package database to describe"
    ),
) -> None:
    """Show hulud-guard information."""
    console.print(Panel.fit(
        f"[bold blue]hulud-guard {__version__}[/bold blue]\n"
        "Scans npm manifests and lock files for known malicious package versions",
        title="Information"
    ))

    console.print(f"\n[bold]Recognized files:[/bold] {', '.join(DEPENDENCY_FILES)}")
    console.print(f"[bold]Default exclusions:[/bold] {', '.join(sorted(DEFAULT_EXCLUDE_DIRS))}")
    console.print(f"[bold]Parsers:[/bold] {', '.join(DependencyParser.get_supported_parser_types())}")

    if database_path is None:
        return

    try:
        database = load_database(database_path)
    except HuludGuardError as e:
        _fail(e)

    table = Table(title="Malicious Package Database")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    for key, value in database.get_database_stats().items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the hulud-guard CLI.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    try:
        exit_code = app(args=argv, prog_name="hulud-guard", standalone_mode=False)
    except typer.Abort:
        err_console.print("Aborted")
        return EXIT_ERROR
    except CLICK_ERROR as e:
        # Exit code 2 means critical findings, so usage errors map to 3
        e.show()
        return EXIT_ERROR

    return exit_code if isinstance(exit_code, int) else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
