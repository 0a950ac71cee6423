"""
Tests for event marker parsing.
"""

import pytest
import tempfile
from datetime import datetime, timezone

from synchro_pose.errors import EventMarkerSlip, InvalidEventMarker
from synchro_pose.event_markers import (
    EventMarker,
    EventMarkerSequence,
    is_skippable,
    parse_event_marker,
    read_event_markers,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestParseEventMarker:
    """Tests for single line parsing."""

    def test_parse_basic_line(self):
        marker = parse_event_marker("2019/05/02 10:11:12.3456 42")

        assert marker.datetime == utc(2019, 5, 2, 10, 11, 12, 345600)
        assert marker.number == 42

    def test_parse_surrounding_whitespace(self):
        marker = parse_event_marker("  2019/05/02\t10:11:12.5   7 \n")

        assert marker.datetime == utc(2019, 5, 2, 10, 11, 12, 500000)
        assert marker.number == 7

    def test_parse_without_fraction(self):
        marker = parse_event_marker("2019/05/02 10:11:12 1")
        assert marker.datetime == utc(2019, 5, 2, 10, 11, 12)

    def test_parse_long_fraction_rounded(self):
        marker = parse_event_marker("2019/05/02 10:11:12.12345678 1")
        assert marker.datetime.microsecond == 123457

    def test_fraction_rounding_carries(self):
        marker = parse_event_marker("2019/05/02 10:11:12.9999999 1")
        assert marker.datetime == utc(2019, 5, 2, 10, 11, 13)

    def test_timestamp_is_utc(self):
        marker = parse_event_marker("2019/05/02 10:11:12.3456 1")
        assert marker.datetime.tzinfo == timezone.utc

    @pytest.mark.parametrize("line", [
        "",
        "garbage",
        "2019/05/02 10:11:12.3456",
        "2019/05/02 10:11:12.3456 1 extra",
        "2019-05-02 10:11:12.3456 1",
        "2019/13/02 10:11:12.3456 1",
        "2019/05/02 25:11:12.3456 1",
        "2019/05/02 10:11:12.34x 1",
        "2019/05/02 10:11:12.3456 one",
        "2019/05/02 10:11:12.3456 1.5",
        "2019/5/2 1:2:3.5 1",
        "2019/05/02 10:11:12.3456 1_000",
        "2019/05/02 10:11:12.3456 \u0661",
    ])
    def test_invalid_lines(self, line):
        with pytest.raises(InvalidEventMarker) as exc_info:
            parse_event_marker(line)
        assert exc_info.value.raw_line == line

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            parse_event_marker("not a marker")


class TestIsSkippable:

    def test_blank_and_comment(self):
        assert is_skippable("")
        assert is_skippable("   \n")
        assert is_skippable("# header")
        assert is_skippable("  # indented comment")

    def test_marker_line(self):
        assert not is_skippable("2019/05/02 10:11:12.3456 1")


class TestEventMarkerSequence:
    """Tests for the ordering invariant."""

    def test_ordered_sequence(self):
        markers = [
            EventMarker(utc(2019, 5, 2, 10, 0, 10), 1),
            EventMarker(utc(2019, 5, 2, 10, 0, 20), 2),
            EventMarker(utc(2019, 5, 2, 10, 0, 20), 3),
        ]
        sequence = EventMarkerSequence(markers)

        assert len(sequence) == 3
        assert list(sequence) == markers
        assert sequence[1].number == 2
        assert sequence.start == utc(2019, 5, 2, 10, 0, 10)
        assert sequence.end == utc(2019, 5, 2, 10, 0, 20)

    def test_reversed_pair_raises(self):
        first = EventMarker(utc(2019, 5, 2, 10, 0, 20), 1)
        second = EventMarker(utc(2019, 5, 2, 10, 0, 10), 2)

        with pytest.raises(EventMarkerSlip) as exc_info:
            EventMarkerSequence([first, second])

        assert exc_info.value.before is first
        assert exc_info.value.after is second

    def test_first_offending_pair_reported(self):
        markers = [
            EventMarker(utc(2019, 5, 2, 10, 0, 10), 1),
            EventMarker(utc(2019, 5, 2, 10, 0, 30), 2),
            EventMarker(utc(2019, 5, 2, 10, 0, 20), 3),
            EventMarker(utc(2019, 5, 2, 10, 0, 5), 4),
        ]

        with pytest.raises(EventMarkerSlip) as exc_info:
            EventMarkerSequence(markers)

        assert exc_info.value.before.number == 2
        assert exc_info.value.after.number == 3

    def test_empty_sequence(self):
        sequence = EventMarkerSequence([])
        assert len(sequence) == 0
        assert sequence.start is None
        assert sequence.end is None

    def test_from_lines_skips_comments(self):
        lines = [
            "# synchro export\n",
            "\n",
            "2019/05/02 10:11:12.3456 1\n",
            "2019/05/02 10:11:14.3456 2\n",
        ]
        sequence = EventMarkerSequence.from_lines(lines)

        assert [m.number for m in sequence] == [1, 2]

    def test_from_lines_invalid(self):
        with pytest.raises(InvalidEventMarker):
            EventMarkerSequence.from_lines(["2019/05/02 10:11:12.3456 1", "bad line"])


class TestReadEventMarkers:
    """Tests for reading synchro files."""

    @pytest.fixture
    def sample_synchro_content(self):
        return """# event markers
2019/05/02 10:11:12.3456 1
2019/05/02 10:11:14.3461 2

2019/05/02 10:11:16.3470 3
"""

    @pytest.fixture
    def temp_synchro_file(self, sample_synchro_content):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.xpf', delete=False) as f:
            f.write(sample_synchro_content)
            return f.name

    def test_read_file(self, temp_synchro_file):
        sequence = read_event_markers(temp_synchro_file)

        assert len(sequence) == 3
        assert sequence[2].datetime == utc(2019, 5, 2, 10, 11, 16, 347000)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            read_event_markers("/nonexistent/synchro.xpf")

    def test_out_of_order_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.xpf', delete=False) as f:
            f.write("2019/05/02 10:11:20.0 1\n2019/05/02 10:11:10.0 2\n")

        with pytest.raises(EventMarkerSlip):
            read_event_markers(f.name)
