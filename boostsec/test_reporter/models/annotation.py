"""Annotations recognized in test documentation comments."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

DATE_FORMAT = "%Y/%m/%d %H:%M"


class DateAnnotation(BaseModel):
    """``@date: 2023/5/14 18:30``."""

    model_config = ConfigDict(frozen=True)

    key: Literal["@date"]
    value: datetime

    @field_validator("value", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            return datetime.strptime(value, DATE_FORMAT)
        return value


class NameAnnotation(BaseModel):
    """``@name: ...``."""

    model_config = ConfigDict(frozen=True)

    key: Literal["@name"]
    value: str


class DescriptionAnnotation(BaseModel):
    """``@description: ...``."""

    model_config = ConfigDict(frozen=True)

    key: Literal["@description"]
    value: str


class AuthorAnnotation(BaseModel):
    """``@author: ...``."""

    model_config = ConfigDict(frozen=True)

    key: Literal["@author"]
    value: str


Annotation = Annotated[
    DateAnnotation | NameAnnotation | DescriptionAnnotation | AuthorAnnotation,
    Field(discriminator="key"),
]

ANNOTATION_KEYS = frozenset({"@date", "@name", "@description", "@author"})

annotation_adapter: TypeAdapter[Annotation] = TypeAdapter(Annotation)
