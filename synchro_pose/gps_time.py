"""
GPS time resolution module.

Trajectories written by the navigation post-processing are usually timed in
GPS seconds of week, while event markers carry calendar timestamps. Before
the two streams can be compared, trajectory times are anchored to calendar
time through a reference event marker:

    calendar = week_start + seconds_of_week - leap_seconds

where week_start is the start of the GPS week containing the reference
marker. leap_seconds is the GPS - UTC offset to remove (0 when the markers
are already in the GPS time scale, 18 for UTC markers since 2017).
"""

from datetime import datetime, timedelta, timezone
from typing import Tuple
import logging

from .errors import NoEventMarkers
from .event_markers import EventMarker, EventMarkerSequence
from .trajectory import CALENDAR, Position, PositionSeries

logger = logging.getLogger(__name__)

GPS_EPOCH = datetime(1980, 1, 6, tzinfo=timezone.utc)
SECONDS_PER_WEEK = 7 * 24 * 3600


def gps_week_and_seconds(dt: datetime) -> Tuple[int, float]:
    """
    Split a datetime in the GPS time scale into GPS week and seconds of week.

    Args:
        dt: Aware datetime (naive datetimes are taken as UTC)

    Returns:
        (week, seconds_of_week)
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    elapsed = dt - GPS_EPOCH
    week = elapsed // timedelta(weeks=1)
    seconds = (elapsed - timedelta(weeks=week)).total_seconds()
    return week, seconds


class GpsEpochResolver:
    """
    Converts GPS seconds of week into calendar datetimes.

    The first event marker of the sequence is the reference: its GPS week
    fixes the week start applied to every trajectory sample. Samples more
    than half a week away from the reference are moved to the neighbouring
    week, so a trajectory lying entirely in the week after (or before)
    the reference marker still resolves next to it. A trajectory spanning
    the rollover itself never gets here: its seconds of week go backwards
    and PositionSeries rejects it with GpsWeekTimeSlip.
    """

    def __init__(self, event_markers: EventMarkerSequence, leap_seconds: float = 0.0):
        """
        Initialize resolver.

        Args:
            event_markers: Markers of the run; the first one is the reference
            leap_seconds: GPS - marker time scale offset in seconds

        Raises:
            NoEventMarkers: if there is no marker to anchor to
        """
        if len(event_markers) == 0:
            raise NoEventMarkers()

        self.reference: EventMarker = event_markers[0]
        self.leap_seconds = leap_seconds

        gps_datetime = self.reference.datetime + timedelta(seconds=leap_seconds)
        self.week, self.reference_seconds = gps_week_and_seconds(gps_datetime)

        # Calendar datetime (marker time scale) of second 0 of the reference week
        self.offset = GPS_EPOCH + timedelta(weeks=self.week) - timedelta(seconds=leap_seconds)

        logger.debug(
            f"Anchored GPS week {self.week} on event marker {self.reference.number} "
            f"(seconds of week {self.reference_seconds:.4f})"
        )

    def resolve_time(self, seconds: float) -> datetime:
        """Calendar datetime of a GPS seconds-of-week value."""
        delta = seconds - self.reference_seconds
        if delta > SECONDS_PER_WEEK / 2:
            seconds -= SECONDS_PER_WEEK
        elif delta < -SECONDS_PER_WEEK / 2:
            seconds += SECONDS_PER_WEEK

        return self.offset + timedelta(seconds=seconds)

    def resolve_position(self, position: Position) -> Position:
        return Position(
            time=self.resolve_time(position.time),
            longitude=position.longitude,
            latitude=position.latitude,
            height=position.height,
            roll=position.roll,
            pitch=position.pitch,
            yaw=position.yaw,
        )

    def resolve(self, series: PositionSeries) -> PositionSeries:
        """
        Resolve a whole series into calendar time.

        A series that is already in calendar time is returned unchanged.
        """
        if series.is_calendar:
            return series

        resolved = PositionSeries(
            (self.resolve_position(p) for p in series),
            time_unit=CALENDAR,
        )

        if len(resolved):
            logger.info(
                f"Resolved {len(resolved)} trajectory samples to "
                f"{resolved.start.isoformat()} - {resolved.end.isoformat()}"
            )
        return resolved
