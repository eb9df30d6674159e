"""Models for the assembled test report."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportRow(BaseModel):
    """One render-ready line of the test report."""

    model_config = ConfigDict(frozen=True)

    package: str = Field(..., description="Logical package path")
    test: str = Field(..., description="Primary test name")
    sub_test: str = Field(default="", description="Sub-test name, empty if none")
    result: Literal["pass", "fail"] = Field(..., description="Test outcome")
    description: str = Field(default="", description="Joined description")
    author: str = Field(default="", description="Joined author")

    @property
    def identifier(self) -> str:
        """Test identifier as reported by the event stream."""
        if self.sub_test:
            return f"{self.test}/{self.sub_test}"
        return self.test

    def as_cells(self) -> tuple[str, str, str, str, str, str]:
        """Return the row in table column order."""
        return (
            self.package,
            self.test,
            self.sub_test,
            self.result,
            self.description,
            self.author,
        )


class ReportSummary(BaseModel):
    """Aggregate counters and ordered rows of a test report."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, description="Number of reported tests")
    pass_count: int = Field(default=0, description="Number of passed tests")
    fail_count: int = Field(default=0, description="Number of failed tests")
    rows: list[ReportRow] = Field(default_factory=list, description="Report rows")

    @model_validator(mode="after")
    def _check_counts(self) -> "ReportSummary":
        if not self.total == self.pass_count + self.fail_count == len(self.rows):
            raise ValueError(
                f"inconsistent counts: total={self.total} pass={self.pass_count} "
                f"fail={self.fail_count} rows={len(self.rows)}"
            )
        return self

    @property
    def has_failures(self) -> bool:
        """Whether any reported test failed."""
        return self.fail_count > 0
