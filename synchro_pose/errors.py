"""
Error kinds raised while loading and synchronizing survey streams.

Every error is fatal to the current run. They all derive from
SynchroPoseError, itself a ValueError, so callers that only care about
"bad input" can catch ValueError.
"""


class SynchroPoseError(ValueError):
    """Base class for all synchronization errors."""


class InvalidEventMarker(SynchroPoseError):
    """A synchro line does not look like `YYYY/MM/DD HH:MM:SS.ffff <n>`."""

    def __init__(self, raw_line: str):
        self.raw_line = raw_line
        super().__init__(f"Invalid event marker line: {raw_line!r}")


class EventMarkerSlip(SynchroPoseError):
    """Two adjacent event markers are not in time order."""

    def __init__(self, before, after):
        self.before = before
        self.after = after
        super().__init__(
            f"Event marker {before.number} at {before.datetime.isoformat()} "
            f"is after event marker {after.number} at {after.datetime.isoformat()}"
        )


class GpsWeekTimeSlip(SynchroPoseError):
    """Two adjacent trajectory samples are not in time order."""

    def __init__(self, before, after):
        self.before = before
        self.after = after
        super().__init__(
            f"Trajectory time goes backwards: {before.time} is followed by {after.time}"
        )


class CountMismatch(SynchroPoseError):
    """The number of event markers differs from the number of images."""

    def __init__(self, event_markers: int, images: int):
        self.event_markers = event_markers
        self.images = images
        super().__init__(
            f"Found {event_markers} event markers but {images} images"
        )


class NoEventMarkers(SynchroPoseError):
    """The synchro log holds no event marker."""

    def __init__(self):
        super().__init__("No event markers found")


class EmptyTrajectory(SynchroPoseError):
    """The trajectory has fewer than two samples, so nothing can be bracketed."""

    def __init__(self, count: int = 0):
        self.count = count
        super().__init__(
            f"Trajectory needs at least two samples, found {count}"
        )
