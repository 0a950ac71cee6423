"""
Event marker (synchro file) parsing module.

A synchro file records one camera trigger per line:

    YYYY/MM/DD HH:MM:SS.ffff <event marker number>

    Example:
        # exposure events
        2019/05/02 10:11:12.3456 1
        2019/05/02 10:11:14.3461 2

Blank lines and lines starting with `#` are ignored. Timestamps carry no
timezone and are interpreted as UTC.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Iterator, List, Optional
import logging

from .errors import EventMarkerSlip, InvalidEventMarker

logger = logging.getLogger(__name__)

COMMENT_PREFIX = '#'

_EVENT_MARKER_RE = re.compile(
    r'^(?P<date>\d{4}/\d{2}/\d{2})\s+(?P<time>\d{2}:\d{2}:\d{2})'
    r'(?:\.(?P<fraction>\d+))?\s+(?P<number>[+-]?\d+)$',
    re.ASCII,
)


@dataclass(frozen=True, order=True)
class EventMarker:
    """A camera trigger: timestamp and event marker number."""
    datetime: datetime
    number: int


def is_skippable(line: str) -> bool:
    """Return True for blank and comment lines."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIX)


def _fraction_to_microseconds(fraction: Optional[str]) -> int:
    if not fraction:
        return 0
    return round(int(fraction) * 10 ** (6 - len(fraction)))


def parse_event_marker(line: str) -> EventMarker:
    """
    Parse one synchro line.

    Args:
        line: Text line, e.g. "2019/05/02 10:11:12.3456 1"

    Returns:
        EventMarker with a UTC timestamp

    Raises:
        InvalidEventMarker: if the line has the wrong shape or any field
            cannot be parsed
    """
    match = _EVENT_MARKER_RE.match(line.strip())
    if match is None:
        raise InvalidEventMarker(line)

    try:
        timestamp = datetime.strptime(
            f"{match.group('date')} {match.group('time')}",
            '%Y/%m/%d %H:%M:%S',
        ).replace(tzinfo=timezone.utc)
        # Rounding the fraction can carry into the next second
        timestamp += timedelta(
            microseconds=_fraction_to_microseconds(match.group('fraction'))
        )
        number = int(match.group('number'))
    except (ValueError, OverflowError):
        raise InvalidEventMarker(line) from None

    return EventMarker(datetime=timestamp, number=number)


class EventMarkerSequence:
    """
    Time-ordered, immutable list of event markers.

    Construction fails with EventMarkerSlip on the first adjacent pair
    that is out of order, so every consumer can rely on the markers being
    sorted by datetime. Equal timestamps are allowed.
    """

    def __init__(self, event_markers: Iterable[EventMarker]):
        self._markers = tuple(event_markers)

        for before, after in zip(self._markers, self._markers[1:]):
            if before.datetime > after.datetime:
                raise EventMarkerSlip(before, after)

    def __len__(self) -> int:
        return len(self._markers)

    def __getitem__(self, index):
        return self._markers[index]

    def __iter__(self) -> Iterator[EventMarker]:
        return iter(self._markers)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EventMarkerSequence):
            return NotImplemented
        return self._markers == other._markers

    def __repr__(self) -> str:
        return f"EventMarkerSequence({len(self._markers)} markers)"

    @property
    def start(self) -> Optional[datetime]:
        """Datetime of the first marker, None if empty."""
        return self._markers[0].datetime if self._markers else None

    @property
    def end(self) -> Optional[datetime]:
        """Datetime of the last marker, None if empty."""
        return self._markers[-1].datetime if self._markers else None

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> 'EventMarkerSequence':
        """Build a sequence from synchro text lines, skipping blanks and comments."""
        markers: List[EventMarker] = []

        for line_num, line in enumerate(lines, 1):
            if is_skippable(line):
                continue
            try:
                markers.append(parse_event_marker(line))
            except InvalidEventMarker:
                logger.error(f"Invalid event marker on line {line_num}: {line.strip()}")
                raise

        return cls(markers)


def read_event_markers(filepath: str) -> EventMarkerSequence:
    """
    Read a synchro file.

    Args:
        filepath: Path to the synchro file

    Returns:
        EventMarkerSequence in file order
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Synchro file not found: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        sequence = EventMarkerSequence.from_lines(f)

    logger.info(f"Parsed {len(sequence)} event markers from {filepath}")
    return sequence
