"""Render reports as text tables."""

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import TextIO

import coverage
from coverage.exceptions import CoverageException
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from boostsec.test_reporter.errors import CoverageReportError
from boostsec.test_reporter.models.report import ReportSummary
from boostsec.test_reporter.models.test_run import ProcessResult

logger = logging.getLogger(__name__)

FULL_HEADER = ("Package", "Test", "SubTest", "Result", "Description", "Author")
COMPACT_HEADER = ("Test", "Result", "Package")

MERGED_COLUMNS = 2


class TableLayout(str, Enum):
    """Column layout of the test report table."""

    FULL = "full"
    COMPACT = "compact"


def merge_leading_cells(
    rows: Sequence[Sequence[str]], columns: int = MERGED_COLUMNS
) -> list[list[str]]:
    """Blank cells repeating the row above in the leading columns.

    A cell is only merged when every cell to its left was merged as well,
    so a test name is never merged across packages.
    """
    merged: list[list[str]] = []
    previous: Sequence[str] | None = None

    for row in rows:
        cells = list(row)
        if previous is not None:
            for column in range(min(columns, len(cells))):
                if cells[column] != previous[column]:
                    break
                cells[column] = ""
        merged.append(cells)
        previous = row

    return merged


def build_report_table(
    summary: ReportSummary, layout: TableLayout = TableLayout.FULL
) -> Table:
    """Build the rich table of a test report."""
    totals = f"total {summary.total}"
    counts = f"pass {summary.pass_count},fail {summary.fail_count}"

    if layout == TableLayout.COMPACT:
        header: Sequence[str] = COMPACT_HEADER
        footer: Sequence[str] = (totals, counts, "")
        rows = [[row.identifier, row.result, row.package] for row in summary.rows]
    else:
        header = FULL_HEADER
        footer = ("", "", totals, counts, "", "")
        rows = merge_leading_cells([row.as_cells() for row in summary.rows])

    table = Table(box=box.ASCII, show_lines=True, show_footer=True)
    for name, footer_cell in zip(header, footer, strict=True):
        table.add_column(name, footer=footer_cell)
    for cells in rows:
        table.add_row(*(Text(cell) for cell in cells))

    return table


def print_report_table(
    summary: ReportSummary,
    writer: TextIO,
    layout: TableLayout = TableLayout.FULL,
    width: int | None = None,
) -> None:
    """Write the test report table to writer."""
    console = Console(file=writer, width=width, highlight=False)
    console.print(build_report_table(summary, layout))


def print_coverage_report(coverage_file: Path, writer: TextIO) -> float:
    """Write the coverage report of a coverage data file to writer.

    Args:
        coverage_file: Coverage data file written by ``coverage run``
        writer: Output sink

    Returns:
        Total coverage percentage

    Raises:
        CoverageReportError: If the data file cannot be reported

    """
    logger.info(f"Reporting coverage from {coverage_file}")
    cov = coverage.Coverage(data_file=str(coverage_file))

    try:
        cov.load()
        return cov.report(file=writer, sort="name")
    except CoverageException as e:
        raise CoverageReportError(f"Failed to report coverage: {e}") from e


def write_vet_output(result: ProcessResult, writer: TextIO) -> None:
    """Pass the static analyzer output through to writer.

    Standard error is shown when the analyzer wrote to it, standard output
    otherwise.
    """
    output = result.stderr if result.stderr else result.stdout
    writer.write(output.decode("utf-8", errors="replace"))
