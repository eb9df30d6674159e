"""pytest plugin writing test events as newline-delimited JSON.

Load it with ``-p boostsec.test_reporter.pytest_plugin --event-log PATH``.
Every test produces a ``run`` event, one ``output`` event per captured
stdout line and a final ``pass``, ``fail`` or ``skip`` event. When the
session finishes one package-scoped event (empty test) is written per
package.
"""

import json
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

import pytest

from boostsec.test_reporter.errors import ConfigurationError
from boostsec.test_reporter.project import discover_module_name, logical_package_path

PLUGIN_NAME = "test_reporter_event_log"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register the event log options."""
    group = parser.getgroup("test-reporter", "test event log")
    group.addoption(
        "--event-log",
        action="store",
        dest="event_log",
        default=None,
        metavar="PATH",
        help="Write test events as newline-delimited JSON to PATH",
    )
    group.addoption(
        "--event-module",
        action="store",
        dest="event_module",
        default=None,
        metavar="NAME",
        help="Module identity prefixed to package paths "
        "(default: pyproject.toml project name)",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Start the event log when ``--event-log`` is given."""
    path = config.getoption("event_log")
    if not path or hasattr(config, "workerinput"):
        return

    module = config.getoption("event_module")
    if not module:
        try:
            module = discover_module_name(config.rootpath)
        except ConfigurationError as e:
            raise pytest.UsageError(str(e)) from e

    config.pluginmanager.register(EventLogWriter(Path(path), module), PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    """Close the event log."""
    writer = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if writer is not None:
        writer.close()
        config.pluginmanager.unregister(writer)


def identifier_from_nodeid(name: str) -> str:
    """Map the name part of a node id to a test identifier.

    ``TestLogin::test_ok[admin/root]`` becomes ``TestLogin.test_ok/admin_root``:
    classes are joined with dots and the parametrization id becomes the
    single sub-test level.
    """
    base, bracket, param = name.partition("[")
    identifier = base.replace("::", ".")
    if bracket:
        param = param.removesuffix("]").replace("/", "_")
        identifier = f"{identifier}/{param}"
    return identifier


class EventLogWriter:
    """Writes the events of one pytest session to a file."""

    def __init__(self, path: Path, module: str) -> None:
        """Open the event log at path."""
        self.path = path
        self.module = module
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file = path.open("w", encoding="utf-8")
        self._outcomes: dict[str, str] = {}
        self._durations: dict[str, float] = {}
        self._packages: dict[str, list[tuple[str, float]]] = {}

    def close(self) -> None:
        """Close the event log file."""
        if not self._file.closed:
            self._file.close()

    def locate(self, nodeid: str) -> tuple[str, str]:
        """Return the (package, test identifier) of a node id."""
        file_part, _, name = nodeid.partition("::")
        package = logical_package_path(self.module, PurePosixPath(file_part).parent)
        return package, identifier_from_nodeid(name)

    def emit(
        self,
        action: str,
        package: str,
        test: str = "",
        elapsed: float | None = None,
        output: str | None = None,
    ) -> None:
        """Write one event record."""
        record: dict[str, Any] = {
            "Time": datetime.now(timezone.utc).isoformat(),
            "Action": action,
            "Package": package,
        }
        if test:
            record["Test"] = test
        if elapsed is not None:
            record["Elapsed"] = round(elapsed, 3)
        if output is not None:
            record["Output"] = output
        self._file.write(json.dumps(record) + "\n")
        self._file.flush()

    def pytest_runtest_logstart(self, nodeid: str) -> None:
        """Write the run event of a test."""
        package, test = self.locate(nodeid)
        self.emit("run", package, test)

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        """Record the outcome of one test phase and its captured output."""
        nodeid = report.nodeid
        self._durations[nodeid] = self._durations.get(nodeid, 0.0) + report.duration

        if report.failed:
            self._outcomes[nodeid] = "fail"
        elif report.skipped:
            self._outcomes.setdefault(nodeid, "skip")
        elif report.when == "call":
            self._outcomes.setdefault(nodeid, "pass")

        # The teardown report carries the output captured in every phase.
        if report.when == "teardown" and report.capstdout:
            package, test = self.locate(nodeid)
            for line in report.capstdout.splitlines(keepends=True):
                self.emit("output", package, test, output=line)

    def pytest_runtest_logfinish(self, nodeid: str) -> None:
        """Write the final result event of a test."""
        package, test = self.locate(nodeid)
        action = self._outcomes.pop(nodeid, "pass")
        elapsed = self._durations.pop(nodeid, 0.0)
        self.emit(action, package, test, elapsed=elapsed)
        self._packages.setdefault(package, []).append((action, elapsed))

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        """Fail the package of a module that could not be collected."""
        if not report.failed:
            return
        package, _ = self.locate(report.nodeid)
        for line in report.longreprtext.splitlines(keepends=True):
            self.emit("output", package, output=line)
        self._packages.setdefault(package, []).append(("fail", 0.0))

    def pytest_sessionfinish(self) -> None:
        """Write one package-scoped result event per package."""
        for package in sorted(self._packages):
            results = self._packages[package]
            actions = {action for action, _ in results}
            if "fail" in actions:
                action = "fail"
            elif actions == {"skip"}:
                action = "skip"
            else:
                action = "pass"
            self.emit(action, package, elapsed=sum(e for _, e in results))
