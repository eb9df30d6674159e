"""CLI entry point for the test reporter."""

import io
import logging
import sys
from pathlib import Path

import typer

from boostsec.test_reporter.config_loader import load_config
from boostsec.test_reporter.errors import ReporterError
from boostsec.test_reporter.orchestrator import ReportOrchestrator, ReportType
from boostsec.test_reporter.process_runner import SubprocessRunner
from boostsec.test_reporter.table_renderer import TableLayout

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,  # Force reconfiguration even if already set up
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.command()
def main(  # noqa: PLR0913
    report_type: ReportType = typer.Option(
        ReportType.ALL,
        "-t",
        "--type",
        help="a(all) c(coverage) t(test) v(vet)",
    ),
    output: Path | None = typer.Option(  # noqa: B008
        None, "-o", "--output", help="Output file, default stdout"
    ),
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."), "--project-dir", help="Root directory of the project under test"
    ),
    config_file: Path | None = typer.Option(  # noqa: B008
        None, "--config", help="YAML configuration file"
    ),
    module: str | None = typer.Option(
        None,
        "--module",
        help="Module identity prefixed to package paths "
        "(default: pyproject.toml project name)",
    ),
    width: int | None = typer.Option(
        None, "--width", help="Width of rendered tables (default: terminal width)"
    ),
    events: Path | None = typer.Option(  # noqa: B008
        None,
        "--events",
        help="Read test events from this file ('-' for stdin) instead of "
        "running the test command",
    ),
    coverage_file: Path | None = typer.Option(  # noqa: B008
        None, "--coverage-file", help="Coverage data file, only valid with --events"
    ),
    layout: TableLayout = typer.Option(
        TableLayout.FULL, "--layout", help="Test table layout"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with code 1 when a test failed"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
) -> None:
    """Run the test suite and static analysis and report the results."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logger.info(f"Project directory: {project_dir}")
    logger.info(f"Report type: {report_type.name.lower()}")

    try:
        config = load_config(
            project_dir, config_file, module=module, table_width=width
        )
        orchestrator = ReportOrchestrator(config, SubprocessRunner())

        report = io.StringIO()
        summary = orchestrator.generate(
            report_type,
            report,
            layout=layout,
            events_file=events,
            coverage_file=coverage_file,
        )

        if output is not None:
            output.write_text(report.getvalue(), encoding="utf-8")
        else:
            sys.stdout.write(report.getvalue())
    except (ReporterError, OSError) as e:
        logger.error(f"Report generation failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if summary is None:
        return

    logger.info(
        f"Tests: {summary.total} total, {summary.pass_count} passed, "
        f"{summary.fail_count} failed"
    )
    if strict and summary.has_failures:
        logger.error(f"Tests failed: {summary.fail_count}/{summary.total}")
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
