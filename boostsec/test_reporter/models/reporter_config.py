"""Configuration model for a report generation run."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

PLUGIN_MODULE = "boostsec.test_reporter.pytest_plugin"

DEFAULT_TEST_COMMAND = [
    "{python}",
    "-m",
    "coverage",
    "run",
    "-m",
    "pytest",
    "-p",
    PLUGIN_MODULE,
    "--event-log",
    "{events}",
    "--event-module",
    "{module}",
    "--rootdir",
    "{project_dir}",
]

DEFAULT_VET_COMMAND = [
    "{python}",
    "-m",
    "ruff",
    "check",
    "--output-format=json",
    ".",
]

DEFAULT_EXCLUDE_DIRS = [
    "__pycache__",
    "build",
    "dist",
    "node_modules",
    "site-packages",
    "venv",
]


class ReporterConfig(BaseModel):
    """Immutable configuration of one report generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_dir: Path = Field(
        default=Path("."), description="Root of the project under test"
    )
    module: str | None = Field(
        default=None,
        description="Module identity used as the package path prefix "
        "(defaults to the pyproject.toml project name)",
    )
    test_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TEST_COMMAND),
        description="Command running the test suite",
    )
    vet_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VET_COMMAND),
        description="Command running the static analyzer",
    )
    test_file_patterns: list[str] = Field(
        default_factory=lambda: ["test_*.py", "*_test.py"],
        description="Glob patterns of test file names",
    )
    test_function_prefix: str = Field(
        default="test", description="Name prefix of test functions"
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names never scanned (hidden ones are always skipped)",
    )
    fail_on_test_stderr: bool = Field(
        default=True, description="Abort when the test command writes to stderr"
    )
    table_width: int | None = Field(
        default=None, description="Width of rendered tables, None to autodetect"
    )
