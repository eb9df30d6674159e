"""Exceptions raised while building a test report."""


class ReporterError(Exception):
    """Base exception for all test reporter errors."""


class ConfigurationError(ReporterError):
    """Raised when the reporter configuration is invalid or missing."""


class MetadataError(ReporterError):
    """Raised when test sources or their annotations cannot be parsed."""


class EventStreamError(ReporterError):
    """Raised when a line of the event stream cannot be decoded."""


class ReportAssemblyError(ReporterError):
    """Raised when events cannot be assembled into a report."""


class TestRunError(ReporterError):
    """Raised when the test command cannot produce a usable run."""

    __test__ = False


class CoverageReportError(ReporterError):
    """Raised when the coverage data cannot be reported."""
