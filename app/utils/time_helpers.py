import enum
from datetime import datetime, timezone


class BookingState(str, enum.Enum):
    upcoming = "upcoming"
    active = "active"
    ended = "ended"


def utcnow():
    """Current instant as a naive UTC datetime, the way booking times are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def booking_state(start_time, end_time, now=None):
    """
    Derive the lifecycle state of a booking from its interval.

    The state is never stored: it is recomputed against `now` (the current
    instant by default) every time it is needed.
    """
    if now is None:
        now = utcnow()
    if now < start_time:
        return BookingState.upcoming
    if now < end_time:
        return BookingState.active
    return BookingState.ended
