"""Correlate test events with metadata into a report summary."""

import logging
from collections.abc import Iterable, Mapping

from boostsec.test_reporter.errors import ReportAssemblyError
from boostsec.test_reporter.models.report import ReportRow, ReportSummary
from boostsec.test_reporter.models.test_event import TestEvent
from boostsec.test_reporter.models.test_metadata import TestMetadata

logger = logging.getLogger(__name__)


def split_test_identifier(identifier: str) -> tuple[str, str]:
    """Split a test identifier into its primary and sub-test names.

    Args:
        identifier: Test identifier such as ``test_login`` or
            ``test_login/admin``

    Returns:
        Tuple of (primary, sub), sub is empty without a ``/``

    Raises:
        ReportAssemblyError: If the identifier has more than one ``/``

    """
    parts = identifier.split("/")
    if len(parts) == 1:
        return parts[0], ""
    if len(parts) == 2:
        return parts[0], parts[1]
    raise ReportAssemblyError(
        f"Test identifier {identifier!r} has {len(parts) - 1} '/' separators, "
        "at most one sub-test level is supported"
    )


def build_row(
    event: TestEvent, metadata: Mapping[str, Mapping[str, TestMetadata]]
) -> ReportRow:
    """Join one result event with the metadata of its primary test."""
    test, sub_test = split_test_identifier(event.test)
    description = ""
    author = ""

    info = metadata.get(event.package, {}).get(test)
    if info is not None:
        description = info.description
        author = info.author
        if sub_test:
            description = f"{description}({sub_test})"

    return ReportRow(
        package=event.package,
        test=test,
        sub_test=sub_test,
        result=event.action,
        description=description,
        author=author,
    )


def assemble_report(
    events: Iterable[TestEvent],
    metadata: Mapping[str, Mapping[str, TestMetadata]],
) -> ReportSummary:
    """Assemble a report from the result events of a test run.

    Only events with a test identifier and a pass or fail action are
    reported. Packages are ordered by name and tests by identifier.

    Args:
        events: Events of the run in stream order
        metadata: Lookup of package path to test name to metadata

    Returns:
        Summary with one row per result event

    Raises:
        ReportAssemblyError: If a test identifier cannot be split

    """
    by_package: dict[str, list[TestEvent]] = {}
    pass_count = 0
    fail_count = 0

    for event in events:
        if not event.is_result:
            continue
        by_package.setdefault(event.package, []).append(event)
        if event.action == "pass":
            pass_count += 1
        else:
            fail_count += 1

    rows: list[ReportRow] = []
    for package in sorted(by_package):
        for event in sorted(by_package[package], key=lambda e: e.test):
            rows.append(build_row(event, metadata))

    logger.info(
        f"Assembled report for {len(by_package)} packages: "
        f"{pass_count} passed, {fail_count} failed"
    )
    return ReportSummary(
        total=pass_count + fail_count,
        pass_count=pass_count,
        fail_count=fail_count,
        rows=rows,
    )
