"""Data models for test events, metadata, reports and configuration."""

from boostsec.test_reporter.models.annotation import (
    Annotation,
    AuthorAnnotation,
    DateAnnotation,
    DescriptionAnnotation,
    NameAnnotation,
)
from boostsec.test_reporter.models.report import ReportRow, ReportSummary
from boostsec.test_reporter.models.reporter_config import ReporterConfig
from boostsec.test_reporter.models.test_event import TestEvent
from boostsec.test_reporter.models.test_metadata import MetadataIndex, TestMetadata
from boostsec.test_reporter.models.test_run import ProcessResult, TestRun

__all__ = [
    "Annotation",
    "AuthorAnnotation",
    "DateAnnotation",
    "DescriptionAnnotation",
    "MetadataIndex",
    "NameAnnotation",
    "ProcessResult",
    "ReportRow",
    "ReportSummary",
    "ReporterConfig",
    "TestEvent",
    "TestMetadata",
    "TestRun",
]
