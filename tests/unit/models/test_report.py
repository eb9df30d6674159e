"""Tests for report models."""

import pytest
from pydantic import ValidationError

from boostsec.test_reporter.models.report import ReportRow, ReportSummary


def _row(result: str = "pass", sub_test: str = "") -> ReportRow:
    return ReportRow(
        package="example/pkg",
        test="test_login",
        sub_test=sub_test,
        result=result,  # type: ignore[arg-type]
    )


def test_report_row_defaults() -> None:
    """ReportRow defaults sub-test, description and author to empty strings."""
    row = _row()

    assert row.sub_test == ""
    assert row.description == ""
    assert row.author == ""
    assert row.as_cells() == ("example/pkg", "test_login", "", "pass", "", "")


def test_report_row_identifier() -> None:
    """identifier rebuilds the stream identifier from primary and sub-test."""
    assert _row().identifier == "test_login"
    assert _row(sub_test="admin").identifier == "test_login/admin"


def test_report_row_invalid_result() -> None:
    """ReportRow only accepts pass and fail results."""
    with pytest.raises(ValidationError):
        _row(result="skip")


def test_report_summary_consistent_counts() -> None:
    """ReportSummary accepts counts matching its rows."""
    summary = ReportSummary(
        total=2, pass_count=1, fail_count=1, rows=[_row(), _row("fail")]
    )

    assert summary.total == 2
    assert summary.has_failures


def test_report_summary_empty() -> None:
    """An empty ReportSummary has zero counts and no failures."""
    summary = ReportSummary()

    assert summary.total == 0
    assert summary.rows == []
    assert not summary.has_failures


@pytest.mark.parametrize(
    ("total", "pass_count", "fail_count", "rows"),
    [
        (2, 1, 0, 1),
        (1, 1, 0, 2),
        (3, 1, 1, 2),
    ],
)
def test_report_summary_inconsistent_counts(
    total: int, pass_count: int, fail_count: int, rows: int
) -> None:
    """ReportSummary rejects counts that do not add up."""
    with pytest.raises(ValidationError, match="inconsistent counts"):
        ReportSummary(
            total=total,
            pass_count=pass_count,
            fail_count=fail_count,
            rows=[_row() for _ in range(rows)],
        )
