from sqlalchemy.orm import Session
from app.models.booking import Booking
from app.utils.errors import InvalidState


def intervals_overlap(start_a, end_a, start_b, end_b):
    """
    Whether the half-open intervals [start_a, end_a) and [start_b, end_b) intersect.

    Back-to-back intervals, where one ends exactly when the other begins, do not overlap.
    """
    return start_a < end_b and start_b < end_a


def validate_interval(start_time, end_time):
    """Reject zero-length and inverted intervals."""
    if start_time >= end_time:
        raise InvalidState("End time must be after start time")


def has_conflict(
    db: Session, room_id: int, start_time, end_time, exclude_booking_id: int = None
):
    """
    Check whether [start_time, end_time) overlaps any booking of the room.

    The booking `exclude_booking_id`, if given, is ignored so that a booking
    being rescheduled does not conflict with itself.
    """
    # Same rule as intervals_overlap, evaluated by the database
    query = db.query(Booking.id).filter(
        Booking.room_id == room_id,
        Booking.start_time < end_time,
        Booking.end_time > start_time,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.first() is not None
