"""
Synchro Pose Package

Interpolates the trajectory pose of every survey image at the time of its
camera trigger.

Inputs:
    - Synchro file: event markers `YYYY/MM/DD HH:MM:SS.ffff <number>`
    - Image list: one file name per event marker, in capture order
    - Trajectory: CSV or binary SBET, timed in GPS seconds of week or calendar time

Processing Chain:
    event markers + trajectory (GPS seconds) → calendar time → bracket sweep → linear interpolation

Output:
    file_name, datetime, longitude, latitude, height, roll, pitch, yaw per image
"""

from .errors import (
    SynchroPoseError,
    InvalidEventMarker,
    EventMarkerSlip,
    GpsWeekTimeSlip,
    CountMismatch,
    NoEventMarkers,
    EmptyTrajectory,
)
from .config import Config
from .event_markers import EventMarker, EventMarkerSequence, parse_event_marker, read_event_markers
from .images import read_image_names
from .trajectory import Position, PositionSeries, SBETReader, read_trajectory
from .gps_time import GpsEpochResolver
from .interpolation import interpolate_pose
from .synchronizer import Synchronizer, SynchronizedRecord, synchronize_files
from .writer import write_records_csv

__version__ = "0.1.0"
__all__ = [
    "SynchroPoseError",
    "InvalidEventMarker",
    "EventMarkerSlip",
    "GpsWeekTimeSlip",
    "CountMismatch",
    "NoEventMarkers",
    "EmptyTrajectory",
    "Config",
    "EventMarker",
    "EventMarkerSequence",
    "parse_event_marker",
    "read_event_markers",
    "read_image_names",
    "Position",
    "PositionSeries",
    "SBETReader",
    "read_trajectory",
    "GpsEpochResolver",
    "interpolate_pose",
    "Synchronizer",
    "SynchronizedRecord",
    "synchronize_files",
    "write_records_csv",
]
