"""
Trajectory module.

Holds the time-ordered position/orientation samples of the vehicle and the
readers for the supported trajectory files.

Trajectory File Format (CSV-style):
    header row, then one sample per row, e.g.

    GpsTime,X,Y,Z,Roll,Pitch,Azimuth
    381072.000,6.5661,46.5191,512.31,0.52,-1.03,87.2

    Column names are matched case-insensitively against aliases (see
    COLUMN_ALIASES). The delimiter may be a comma, semicolon, tab or
    whitespace, and the header may start with '#'.

    - time: GPS seconds of week (numeric) or a calendar timestamp (UTC)
    - longitude, latitude: degrees
    - height: ellipsoidal height (meters)
    - roll, pitch, yaw: orientation in degrees

Binary SBET files (GPS seconds of week, radians) are also supported.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union
import logging
import re

from .errors import GpsWeekTimeSlip

logger = logging.getLogger(__name__)

# Time units a PositionSeries can be expressed in
GPS_SECONDS = 'gps_seconds'
CALENDAR = 'calendar'
TIME_UNITS = (GPS_SECONDS, CALENDAR)

POSE_FIELDS = ('longitude', 'latitude', 'height', 'roll', 'pitch', 'yaw')

COLUMN_ALIASES: Dict[str, List[str]] = {
    'time': ['time', 'gpstime', 'gps_time', 't', 'datetime'],
    'longitude': ['longitude', 'lon', 'x'],
    'latitude': ['latitude', 'lat', 'y'],
    'height': ['height', 'altitude', 'alt', 'z'],
    'roll': ['roll'],
    'pitch': ['pitch'],
    'yaw': ['yaw', 'heading', 'azimuth'],
}


@dataclass(frozen=True)
class Position:
    """
    A trajectory sample.

    Attributes:
        time: GPS seconds of week (float) or calendar time (aware datetime)
        longitude: Longitude in degrees
        latitude: Latitude in degrees
        height: Ellipsoidal height in meters
        roll: Roll angle in degrees
        pitch: Pitch angle in degrees
        yaw: Yaw/heading angle in degrees
    """
    time: Union[float, datetime]
    longitude: float
    latitude: float
    height: float
    roll: float
    pitch: float
    yaw: float


class PositionSeries:
    """
    Time-ordered, immutable trajectory samples.

    The series does not interpret its time values: it only checks that they
    never go backwards, in whatever unit they are given. Resolving GPS
    seconds of week into calendar time is done by GpsEpochResolver.
    """

    def __init__(self, positions: Iterable[Position], time_unit: str = GPS_SECONDS):
        if time_unit not in TIME_UNITS:
            raise ValueError(f"Unknown time unit: {time_unit}")

        self.time_unit = time_unit
        self._positions = tuple(positions)

        for before, after in zip(self._positions, self._positions[1:]):
            if before.time > after.time:
                raise GpsWeekTimeSlip(before, after)

    def __len__(self) -> int:
        return len(self._positions)

    def __getitem__(self, index):
        return self._positions[index]

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def __repr__(self) -> str:
        return f"PositionSeries({len(self._positions)} samples, {self.time_unit})"

    @property
    def is_calendar(self) -> bool:
        return self.time_unit == CALENDAR

    @property
    def start(self):
        return self._positions[0].time if self._positions else None

    @property
    def end(self):
        return self._positions[-1].time if self._positions else None

    @classmethod
    def from_csv(
        cls,
        filepath: str,
        aliases: Optional[Dict[str, List[str]]] = None,
        time_unit: str = 'auto',
    ) -> 'PositionSeries':
        """
        Load a trajectory from a delimited text file.

        Args:
            filepath: Path to the trajectory file
            aliases: Extra column name aliases per field, added to COLUMN_ALIASES
            time_unit: 'auto', 'gps_seconds' or 'calendar'. 'auto' picks GPS
                seconds for a numeric time column and calendar time otherwise.

        Returns:
            PositionSeries instance
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Trajectory file not found: {filepath}")

        with open(path, 'r', encoding='utf-8-sig') as f:
            header = f.readline().strip().lstrip('#').strip()

        sep = _sniff_delimiter(header)
        names = [name.strip() for name in re.split(sep, header)]
        df = pd.read_csv(
            path,
            sep=sep,
            header=None,
            names=names,
            skiprows=1,
            skipinitialspace=True,
            encoding='utf-8-sig',
        )

        columns = _resolve_columns(names, aliases)

        time_col = df[columns['time']]
        if time_unit == 'auto':
            time_unit = GPS_SECONDS if pd.api.types.is_numeric_dtype(time_col) else CALENDAR

        if time_unit == GPS_SECONDS:
            times = pd.to_numeric(time_col).astype(float).tolist()
        elif time_unit == CALENDAR:
            if pd.api.types.is_numeric_dtype(time_col):
                raise ValueError(
                    f"Time column '{columns['time']}' is numeric and cannot be read as calendar time"
                )
            times = list(pd.to_datetime(time_col, utc=True).dt.to_pydatetime())
        else:
            raise ValueError(f"Unknown time unit: {time_unit}")

        values = {
            field: df[columns[field]].astype(float).tolist()
            for field in POSE_FIELDS
        }

        positions = [
            Position(time, *fields)
            for time, *fields in zip(times, *(values[field] for field in POSE_FIELDS))
        ]

        logger.info(f"Loaded {len(positions)} trajectory samples ({time_unit}) from {filepath}")
        return cls(positions, time_unit=time_unit)

    @classmethod
    def from_sbet(cls, filepath: str) -> 'PositionSeries':
        """Load a trajectory from a binary SBET file."""
        return SBETReader(filepath).read_series()


def _sniff_delimiter(header: str) -> str:
    for delimiter in (',', ';', '\t'):
        if delimiter in header:
            return delimiter
    return r'\s+'


def _resolve_columns(
    names: List[str],
    aliases: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, str]:
    """
    Map every trajectory field to a column of the file.

    Raises:
        ValueError: if a field has no matching column
    """
    lookup = {name.lower(): name for name in names}
    columns = {}
    missing = []

    for field, known in COLUMN_ALIASES.items():
        candidates = list((aliases or {}).get(field, [])) + known
        for candidate in candidates:
            if candidate.lower() in lookup:
                columns[field] = lookup[candidate.lower()]
                break
        else:
            missing.append(field)

    if missing:
        raise ValueError(
            f"Trajectory columns not found for: {', '.join(missing)} (header: {names})"
        )

    return columns


class SBETReader:
    """
    Reader for binary SBET (Smoothed Best Estimate of Trajectory) files.

    SBET binary format (per epoch), 17 little-endian doubles:
        time (GPS seconds of week), latitude, longitude, altitude,
        x/y/z velocity, roll, pitch, heading, wander angle,
        x/y/z acceleration, x/y/z angular rate

    Angles and coordinates are stored in radians.
    """

    RECORD_SIZE = 136  # bytes
    NUM_FIELDS = 17

    def __init__(self, filepath: str):
        self.filepath = filepath
        self.path = Path(filepath)

        if not self.path.exists():
            raise FileNotFoundError(f"SBET file not found: {filepath}")

    def read_series(self) -> PositionSeries:
        """
        Read every epoch of the file.

        Returns:
            PositionSeries in GPS seconds of week, angles in degrees
        """
        data = np.fromfile(self.path, dtype='<f8')
        if data.size % self.NUM_FIELDS != 0:
            raise ValueError(
                f"SBET file size is not a multiple of {self.RECORD_SIZE} bytes: {self.filepath}"
            )

        records = data.reshape(-1, self.NUM_FIELDS)
        degrees = np.rad2deg(records[:, [2, 1, 7, 8, 9]])

        positions = [
            Position(
                time=time,
                longitude=lon,
                latitude=lat,
                height=height,
                roll=roll,
                pitch=pitch,
                yaw=heading,
            )
            for time, height, (lon, lat, roll, pitch, heading) in zip(
                records[:, 0].tolist(), records[:, 3].tolist(), degrees.tolist()
            )
        ]

        logger.info(f"Read {len(positions)} epochs from SBET file {self.filepath}")
        return PositionSeries(positions, time_unit=GPS_SECONDS)


def read_trajectory(
    filepath: str,
    file_format: str = 'auto',
    **kwargs,
) -> PositionSeries:
    """
    Load a trajectory from file.

    Args:
        filepath: Path to trajectory file
        file_format: 'csv', 'sbet', or 'auto' (detect from extension)
        **kwargs: Additional arguments for PositionSeries.from_csv

    Returns:
        PositionSeries instance
    """
    path = Path(filepath)

    if file_format == 'auto':
        ext = path.suffix.lower()
        if ext in ['.sbet', '.out']:
            file_format = 'sbet'
        else:
            file_format = 'csv'

    if file_format == 'sbet':
        return PositionSeries.from_sbet(filepath)
    elif file_format == 'csv':
        return PositionSeries.from_csv(filepath, **kwargs)
    else:
        raise ValueError(f"Unknown trajectory format: {file_format}")
