"""Tests for annotation models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from boostsec.test_reporter.models.annotation import (
    AuthorAnnotation,
    DateAnnotation,
    DescriptionAnnotation,
    NameAnnotation,
    annotation_adapter,
)


@pytest.mark.parametrize(
    ("key", "model"),
    [
        ("@name", NameAnnotation),
        ("@description", DescriptionAnnotation),
        ("@author", AuthorAnnotation),
    ],
)
def test_annotation_text_keys(key: str, model: type) -> None:
    """Text annotations are selected by their key."""
    annotation = annotation_adapter.validate_python({"key": key, "value": "x"})

    assert isinstance(annotation, model)
    assert annotation.value == "x"


def test_annotation_date() -> None:
    """@date values are parsed with the YYYY/M/D HH:MM format."""
    annotation = annotation_adapter.validate_python(
        {"key": "@date", "value": "2023/5/14 18:30"}
    )

    assert isinstance(annotation, DateAnnotation)
    assert annotation.value == datetime(2023, 5, 14, 18, 30)


@pytest.mark.parametrize(
    "value", ["2023-05-14 18:30", "14/5/2023 18:30", "2023/5/14", "yesterday"]
)
def test_annotation_invalid_date(value: str) -> None:
    """Malformed @date values are rejected."""
    with pytest.raises(ValidationError):
        annotation_adapter.validate_python({"key": "@date", "value": value})


def test_annotation_unknown_key() -> None:
    """Keys outside the recognized set are rejected by the union."""
    with pytest.raises(ValidationError):
        annotation_adapter.validate_python({"key": "@owner", "value": "bob"})
