"""
Configuration module for event marker synchronization.

Handles loading and validation of configuration from YAML files.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

TRAJECTORY_TIMES = ('auto', 'gps_seconds', 'calendar')
TRAJECTORY_FORMATS = ('auto', 'csv', 'sbet')


@dataclass
class TimeSettings:
    """How trajectory time relates to event marker time."""
    leap_seconds: float = 0.0  # GPS minus event marker time scale, in seconds
    trajectory_time: str = 'auto'  # 'auto', 'gps_seconds' or 'calendar'


@dataclass
class TrajectorySettings:
    """Trajectory file options."""
    format: str = 'auto'  # 'auto', 'csv' or 'sbet'
    columns: Dict[str, List[str]] = field(default_factory=dict)  # extra column aliases per field


@dataclass
class OutputSettings:
    """Output file options."""
    float_precision: Optional[int] = None  # digits after the point, None = full precision


@dataclass
class Config:
    """
    Main configuration class for synchronization.

    Attributes:
        time: Trajectory time interpretation
        trajectory: Trajectory file options
        output: Output file options
    """
    time: TimeSettings = field(default_factory=TimeSettings)
    trajectory: TrajectorySettings = field(default_factory=TrajectorySettings)
    output: OutputSettings = field(default_factory=OutputSettings)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ValueError: on an unknown or out-of-range value
        """
        if self.time.trajectory_time not in TRAJECTORY_TIMES:
            raise ValueError(
                f"time.trajectory_time must be one of {TRAJECTORY_TIMES}, "
                f"got {self.time.trajectory_time!r}"
            )
        if self.trajectory.format not in TRAJECTORY_FORMATS:
            raise ValueError(
                f"trajectory.format must be one of {TRAJECTORY_FORMATS}, "
                f"got {self.trajectory.format!r}"
            )
        precision = self.output.float_precision
        if precision is not None and (not isinstance(precision, int) or precision < 0):
            raise ValueError(f"output.float_precision must be a non-negative integer, got {precision!r}")

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Config object with loaded parameters

        Example YAML structure:
            time:
              leap_seconds: 18
              trajectory_time: gps_seconds
            trajectory:
              format: csv
              columns:
                time: [GpsTime]
                yaw: [Azimuth]
            output:
              float_precision: 9
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loading configuration from {config_path}")

        time_data = data.get('time') or {}
        time = TimeSettings(
            leap_seconds=float(time_data.get('leap_seconds', 0.0)),
            trajectory_time=time_data.get('trajectory_time', 'auto'),
        )

        traj_data = data.get('trajectory') or {}
        columns = {
            name: [aliases] if isinstance(aliases, str) else list(aliases)
            for name, aliases in (traj_data.get('columns') or {}).items()
        }
        trajectory = TrajectorySettings(
            format=traj_data.get('format', 'auto'),
            columns=columns,
        )

        out_data = data.get('output') or {}
        output = OutputSettings(
            float_precision=out_data.get('float_precision'),
        )

        return cls(time=time, trajectory=trajectory, output=output)

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'time': {
                'leap_seconds': self.time.leap_seconds,
                'trajectory_time': self.time.trajectory_time,
            },
            'trajectory': {
                'format': self.trajectory.format,
                'columns': self.trajectory.columns,
            },
            'output': {
                'float_precision': self.output.float_precision,
            },
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
