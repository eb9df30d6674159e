"""Decode newline-delimited JSON test event streams."""

import json
import logging
import sys
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from pydantic import ValidationError

from boostsec.test_reporter.errors import EventStreamError
from boostsec.test_reporter.models.test_event import TestEvent

logger = logging.getLogger(__name__)


def parse_event_line(line: bytes) -> TestEvent:
    """Decode one event stream record.

    Raises:
        EventStreamError: If the line is not a valid event record

    """
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise EventStreamError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise EventStreamError(f"Expected an object, got {type(data).__name__}")

    try:
        return TestEvent.model_validate(data)
    except ValidationError as e:
        raise EventStreamError(f"Invalid event: {e}") from e


def parse_events(stream: BinaryIO | bytes) -> list[TestEvent]:
    """Decode every line of an event stream, preserving stream order.

    Each line must decode on its own; the last line does not need a
    trailing newline.

    Args:
        stream: Binary stream or raw bytes of the event stream

    Returns:
        One event per input line

    Raises:
        EventStreamError: If any line fails to decode

    """
    if isinstance(stream, bytes):
        stream = BytesIO(stream)

    events: list[TestEvent] = []
    for line_number, line in enumerate(stream, start=1):
        try:
            events.append(parse_event_line(line))
        except EventStreamError as e:
            raise EventStreamError(f"Line {line_number}: {e}") from e

    logger.debug(f"Decoded {len(events)} events")
    return events


def load_events(path: Path) -> list[TestEvent]:
    """Decode the event stream stored at path, ``-`` reads standard input."""
    if str(path) == "-":
        return parse_events(sys.stdin.buffer)

    logger.info(f"Reading events from {path}")
    with path.open("rb") as f:
        return parse_events(f)
