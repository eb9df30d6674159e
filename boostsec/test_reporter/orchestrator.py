"""Coordinate test runs, metadata extraction and report rendering."""

import io
import logging
import sys
import tempfile
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import TextIO

from boostsec.test_reporter.errors import ConfigurationError, TestRunError
from boostsec.test_reporter.event_parser import load_events, parse_events
from boostsec.test_reporter.metadata_extractor import extract_metadata
from boostsec.test_reporter.models.report import ReportSummary
from boostsec.test_reporter.models.reporter_config import ReporterConfig
from boostsec.test_reporter.models.test_run import ProcessResult, TestRun
from boostsec.test_reporter.process_runner import ProcessRunner
from boostsec.test_reporter.project import discover_module_name
from boostsec.test_reporter.report_assembler import assemble_report
from boostsec.test_reporter.table_renderer import (
    TableLayout,
    print_coverage_report,
    print_report_table,
    write_vet_output,
)

logger = logging.getLogger(__name__)

EVENTS_FILE_NAME = "events.jsonl"
COVERAGE_FILE_NAME = ".coverage"


class ReportType(str, Enum):
    """Sections produced by a report run."""

    ALL = "a"
    COVERAGE = "c"
    TEST = "t"
    VET = "v"

    @property
    def includes_coverage(self) -> bool:
        """Whether the coverage section is produced."""
        return self in {ReportType.ALL, ReportType.COVERAGE}

    @property
    def includes_tests(self) -> bool:
        """Whether the test table is produced."""
        return self in {ReportType.ALL, ReportType.TEST}

    @property
    def includes_vet(self) -> bool:
        """Whether the static analyzer section is produced."""
        return self in {ReportType.ALL, ReportType.VET}


def expand_command(command: Sequence[str], values: Mapping[str, str]) -> list[str]:
    """Replace ``{name}`` placeholders in every argument of a command."""
    expanded = []
    for arg in command:
        for name, value in values.items():
            arg = arg.replace(f"{{{name}}}", value)
        expanded.append(arg)
    return expanded


class ReportOrchestrator:
    """Produces the report sections of one run."""

    def __init__(self, config: ReporterConfig, runner: ProcessRunner) -> None:
        """Initialize orchestrator with a configuration and a process runner."""
        self.config = config
        self.runner = runner
        self._module = config.module

    @property
    def module(self) -> str:
        """Module identity of the project, discovered on first use."""
        if self._module is None:
            self._module = discover_module_name(self.config.project_dir)
        return self._module

    def _placeholders(
        self, command: Sequence[str], work_dir: Path | None = None
    ) -> dict[str, str]:
        values = {
            "python": sys.executable,
            "project_dir": str(self.config.project_dir.resolve()),
        }
        if any("{module}" in arg for arg in command):
            values["module"] = self.module
        if work_dir is not None:
            values["events"] = str(work_dir / EVENTS_FILE_NAME)
            values["coverage"] = str(work_dir / COVERAGE_FILE_NAME)
        return values

    def run_tests(self, work_dir: Path) -> TestRun:
        """Run the test command and decode its events.

        The event log and coverage data are written below work_dir. Without
        an ``{events}`` placeholder in the command the events are read from
        its standard output.

        Raises:
            TestRunError: If the command cannot start or writes to stderr
            EventStreamError: If the event stream cannot be decoded

        """
        values = self._placeholders(self.config.test_command, work_dir)
        command = expand_command(self.config.test_command, values)
        events_file = Path(values["events"])
        coverage_file = Path(values["coverage"])

        try:
            result = self.runner.run(
                command,
                cwd=self.config.project_dir,
                env={"COVERAGE_FILE": str(coverage_file)},
            )
        except OSError as e:
            raise TestRunError(f"Failed to start test command: {e}") from e

        if result.exit_status != 0:
            logger.warning(f"Test command finished with exit code {result.exit_status}")

        if result.stderr and self.config.fail_on_test_stderr:
            raise TestRunError(
                "Test command wrote to stderr:\n"
                + result.stderr.decode("utf-8", errors="replace")
            )

        if any("{events}" in arg for arg in self.config.test_command):
            if not events_file.exists():
                raise TestRunError(f"Test command wrote no event log to {events_file}")
            events = load_events(events_file)
        else:
            events = parse_events(result.stdout)

        logger.info(f"Test run produced {len(events)} events")
        return TestRun(
            events=events,
            coverage_file=coverage_file if coverage_file.exists() else None,
            exit_status=result.exit_status,
        )

    def build_summary(self, test_run: TestRun) -> ReportSummary:
        """Assemble the report of a test run with the project's metadata."""
        metadata = extract_metadata(
            self.config.project_dir,
            self.module,
            patterns=self.config.test_file_patterns,
            function_prefix=self.config.test_function_prefix,
            exclude_dirs=self.config.exclude_dirs,
        )
        return assemble_report(test_run.events, metadata)

    def run_vet(self) -> ProcessResult:
        """Run the static analyzer and capture its output."""
        command = expand_command(
            self.config.vet_command, self._placeholders(self.config.vet_command)
        )

        try:
            result = self.runner.run(command, cwd=self.config.project_dir)
        except OSError as e:
            raise TestRunError(f"Failed to start analyzer command: {e}") from e

        if result.exit_status != 0:
            logger.info(f"Analyzer finished with exit code {result.exit_status}")
        return result

    def generate(
        self,
        report_type: ReportType,
        writer: TextIO,
        layout: TableLayout = TableLayout.FULL,
        events_file: Path | None = None,
        coverage_file: Path | None = None,
    ) -> ReportSummary | None:
        """Write the requested report sections to writer.

        Sections are written in the order coverage, tests, analyzer. When
        events_file is given the test command is not run; the events are
        read from it and the coverage data from coverage_file. Nothing is
        written to writer unless every section succeeds.

        Returns:
            The test report summary, or None when no test section was built

        Raises:
            ConfigurationError: If coverage_file is given without events_file,
                or the coverage section has no data

        """
        if coverage_file is not None and events_file is None:
            raise ConfigurationError(
                "A coverage file can only be used together with an events file"
            )

        summary: ReportSummary | None = None
        vet_result: ProcessResult | None = None
        buffer = io.StringIO()

        with tempfile.TemporaryDirectory(prefix="test-reporter-") as tmp:
            test_run: TestRun | None = None
            if report_type.includes_coverage or report_type.includes_tests:
                if events_file is not None:
                    test_run = TestRun(
                        events=load_events(events_file), coverage_file=coverage_file
                    )
                else:
                    test_run = self.run_tests(Path(tmp))

                if report_type.includes_coverage and test_run.coverage_file is None:
                    raise ConfigurationError(
                        "No coverage data available for the coverage report"
                    )
                if report_type.includes_tests:
                    summary = self.build_summary(test_run)

            if report_type.includes_vet:
                vet_result = self.run_vet()

            # Coverage data written by the run only exists inside tmp.
            if report_type.includes_coverage and test_run is not None:
                if test_run.coverage_file is not None:
                    print_coverage_report(test_run.coverage_file, buffer)
            if summary is not None:
                print_report_table(
                    summary, buffer, layout, width=self.config.table_width
                )
            if vet_result is not None:
                write_vet_output(vet_result, buffer)

        writer.write(buffer.getvalue())
        return summary
