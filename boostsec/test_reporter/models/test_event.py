"""Models for events decoded from a test event stream."""

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_NANOSECONDS = re.compile(r"(\.\d{6})\d+")

EventAction = Literal["run", "pause", "cont", "pass", "bench", "fail", "output", "skip"]

RESULT_ACTIONS = frozenset({"pass", "fail"})


class TestEvent(BaseModel):
    """One record of the test event stream.

    Keys are matched case-insensitively so that both ``Action`` and
    ``action`` style records decode to the same event.
    """

    __test__ = False

    model_config = ConfigDict(frozen=True)

    time: datetime | None = Field(default=None, description="Event timestamp")
    action: EventAction = Field(..., description="Lifecycle action")
    package: str = Field(..., description="Logical package path")
    test: str = Field(
        default="", description="Test identifier, empty for package events"
    )
    elapsed: float | None = Field(
        default=None, description="Elapsed time in seconds"
    )
    output: str | None = Field(default=None, description="Raw output text")

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key.lower() if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data

    @field_validator("time", mode="before")
    @classmethod
    def _truncate_fraction(cls, value: Any) -> Any:
        # Nanosecond timestamps are cut down to microseconds.
        if isinstance(value, str):
            return _NANOSECONDS.sub(r"\1", value)
        return value

    @property
    def is_result(self) -> bool:
        """Whether the event reports the final outcome of a test."""
        return bool(self.test) and self.action in RESULT_ACTIONS
