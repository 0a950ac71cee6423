"""
Pose interpolation between two bracketing trajectory samples.

All six pose components (longitude, latitude, height, roll, pitch, yaw)
are interpolated linearly and independently. Angles are not unwrapped:
a bracket crossing +/-180 degrees interpolates through zero.
"""

from .trajectory import POSE_FIELDS, Position


def interpolate_pose(before: Position, after: Position, target) -> Position:
    """
    Interpolate a pose at `target`.

    Args:
        before: Sample with before.time <= target
        after: Sample with target <= after.time
        target: Query time, same unit as the samples (float or datetime)

    Returns:
        Position at `target`. Boundary times return the sample values exactly.

    Raises:
        ValueError: if target is outside [before.time, after.time]
    """
    if not before.time <= target <= after.time:
        raise ValueError(
            f"Time {target} outside bracket [{before.time}, {after.time}]"
        )

    if target == before.time:
        source = before
    elif target == after.time:
        source = after
    else:
        source = None

    if source is not None:
        return Position(target, *(getattr(source, f) for f in POSE_FIELDS))

    # target is strictly inside the bracket, so the span is non-zero
    t = (target - before.time) / (after.time - before.time)

    values = [
        getattr(before, f) + (getattr(after, f) - getattr(before, f)) * t
        for f in POSE_FIELDS
    ]
    return Position(target, *values)
