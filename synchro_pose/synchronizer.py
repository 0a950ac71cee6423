"""
Synchronizer - event marker / trajectory merge.

Pairs every event marker with its image and interpolates the trajectory at
the marker's timestamp. Both streams are sorted, so they are walked once,
forward only, with one cursor each:

    bracket = (positions[j], positions[j + 1]), trigger = markers[i]

    - bracket.before <= trigger <= bracket.after: emit a record, next trigger
    - trigger < bracket.before: trigger is not covered, skip it
    - bracket.after < trigger: move the bracket forward

The sweep ends as soon as either stream runs out. Triggers outside the
trajectory coverage are dropped without error: the number of records is
the only trace of a run starting or ending mid-trajectory.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
import logging

from .config import Config
from .errors import CountMismatch, EmptyTrajectory, NoEventMarkers
from .event_markers import EventMarkerSequence, read_event_markers
from .gps_time import GpsEpochResolver
from .images import read_image_names
from .interpolation import interpolate_pose
from .trajectory import PositionSeries, read_trajectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynchronizedRecord:
    """Interpolated pose of one image."""
    file_name: str
    datetime: datetime
    longitude: float
    latitude: float
    height: float
    roll: float
    pitch: float
    yaw: float


class Synchronizer:
    """
    Iterator over SynchronizedRecord, in trigger order.

    All input checks happen at construction. The iterator is consumed once;
    build a new Synchronizer to run the sweep again.

    Attributes:
        event_markers: Trigger log
        images: Image names, one per event marker
        positions: Trajectory in calendar time
        matched: Number of records emitted so far
        skipped: Number of triggers dropped so far
    """

    def __init__(
        self,
        event_markers: EventMarkerSequence,
        images: Sequence[str],
        positions: PositionSeries,
        resolver: Optional[GpsEpochResolver] = None,
        leap_seconds: Optional[float] = None,
    ):
        """
        Initialize synchronizer.

        Args:
            event_markers: Time-ordered event markers
            images: Image names, same length as event_markers
            positions: Trajectory, in calendar time or GPS seconds of week
            resolver: Resolver for GPS seconds of week; defaults to one
                anchored on the first event marker
            leap_seconds: GPS - marker time scale offset for the default resolver;
                only valid without `resolver`, which carries its own

        Raises:
            CountMismatch: if markers and images differ in number
            NoEventMarkers: if there are no markers
            EmptyTrajectory: if the trajectory has fewer than two samples
            ValueError: if both resolver and leap_seconds are given
        """
        if resolver is not None and leap_seconds is not None:
            raise ValueError("Pass leap_seconds to the resolver, not to the Synchronizer")
        if len(event_markers) != len(images):
            raise CountMismatch(len(event_markers), len(images))
        if len(event_markers) == 0:
            raise NoEventMarkers()
        if len(positions) < 2:
            raise EmptyTrajectory(len(positions))

        if not positions.is_calendar:
            if resolver is None:
                resolver = GpsEpochResolver(event_markers, leap_seconds=leap_seconds or 0.0)
            positions = resolver.resolve(positions)

        self.event_markers = event_markers
        self.images = list(images)
        self.positions = positions

        self.matched = 0
        self.skipped = 0

        self._trigger = 0
        self._bracket = 0
        self._done = False

    def __iter__(self) -> 'Synchronizer':
        return self

    def __next__(self) -> SynchronizedRecord:
        while not self._done:
            marker = self.event_markers[self._trigger]
            before = self.positions[self._bracket]
            after = self.positions[self._bracket + 1]
            target = marker.datetime

            if before.time <= target <= after.time:
                pose = interpolate_pose(before, after, target)
                record = SynchronizedRecord(
                    file_name=self.images[self._trigger],
                    datetime=target,
                    longitude=pose.longitude,
                    latitude=pose.latitude,
                    height=pose.height,
                    roll=pose.roll,
                    pitch=pose.pitch,
                    yaw=pose.yaw,
                )
                self.matched += 1
                self._next_trigger()
                return record
            elif target < before.time:
                logger.debug(
                    f"Event marker {marker.number} at {target.isoformat()} "
                    f"precedes trajectory coverage, skipped"
                )
                self.skipped += 1
                self._next_trigger()
            else:
                self._next_bracket()

        raise StopIteration

    def _next_trigger(self) -> None:
        self._trigger += 1
        if self._trigger >= len(self.event_markers):
            self._finish()

    def _next_bracket(self) -> None:
        self._bracket += 1
        if self._bracket + 1 >= len(self.positions):
            remaining = len(self.event_markers) - self._trigger
            logger.debug(f"Trajectory ends before {remaining} remaining event markers")
            self.skipped += remaining
            self._finish()

    def _finish(self) -> None:
        self._done = True
        logger.info(
            f"Synchronized {self.matched}/{len(self.event_markers)} event markers"
        )


def synchronize_files(
    synchro_path: str,
    images_path: str,
    trajectory_path: str,
    config: Optional[Config] = None,
) -> List[SynchronizedRecord]:
    """
    Convenience function to synchronize the three input files.

    Args:
        synchro_path: Path to the synchro (event marker) file
        images_path: Path to the image list
        trajectory_path: Path to the trajectory file
        config: Optional configuration

    Returns:
        All synchronized records, in trigger order
    """
    config = config or Config()

    event_markers = read_event_markers(synchro_path)
    images = read_image_names(images_path)

    positions = read_trajectory(
        trajectory_path,
        file_format=config.trajectory.format,
        aliases=config.trajectory.columns,
        time_unit=config.time.trajectory_time,
    )

    synchronizer = Synchronizer(
        event_markers,
        images,
        positions,
        leap_seconds=config.time.leap_seconds,
    )
    return list(synchronizer)
