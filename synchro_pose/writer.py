"""
CSV output of synchronized records.

Columns: file_name, datetime, longitude, latitude, height, roll, pitch, yaw.
Datetimes are written in ISO 8601 with microseconds.
"""

import csv
from pathlib import Path
from typing import IO, Iterable, Optional, Union
import logging

from .synchronizer import SynchronizedRecord

logger = logging.getLogger(__name__)

FIELDNAMES = [
    'file_name', 'datetime',
    'longitude', 'latitude', 'height',
    'roll', 'pitch', 'yaw',
]


def _format_float(value: float, precision: Optional[int]) -> str:
    if precision is None:
        return repr(float(value))
    return f"{value:.{precision}f}"


def format_record(record: SynchronizedRecord, precision: Optional[int] = None) -> list:
    """Return the CSV row of a record."""
    return [
        record.file_name,
        record.datetime.isoformat(timespec='microseconds'),
        *(
            _format_float(getattr(record, name), precision)
            for name in FIELDNAMES[2:]
        ),
    ]


def write_records(
    records: Iterable[SynchronizedRecord],
    stream: IO[str],
    precision: Optional[int] = None,
) -> int:
    """
    Write records as CSV to an open text stream.

    Returns:
        Number of records written
    """
    writer = csv.writer(stream, lineterminator='\n')
    writer.writerow(FIELDNAMES)

    count = 0
    for record in records:
        writer.writerow(format_record(record, precision))
        count += 1
    return count


def write_records_csv(
    records: Iterable[SynchronizedRecord],
    output_path: Union[str, Path],
    precision: Optional[int] = None,
) -> int:
    """
    Save records to a CSV file.

    Args:
        records: Synchronized records
        output_path: Path for output CSV file
        precision: Digits after the point for floats, None for full precision

    Returns:
        Number of records written
    """
    with open(output_path, 'w', newline='') as f:
        count = write_records(records, f, precision)

    logger.info(f"{count} records saved to {output_path}")
    return count
