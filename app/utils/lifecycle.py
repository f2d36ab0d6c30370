"""
Booking lifecycle engine.

A booking is Upcoming before its start, Active between its start (inclusive)
and its end (exclusive), and Ended afterwards. The state is derived on demand
by `booking_state`; only the interval is stored.

Every mutation requires the caller to be an ADMIN of the booking's room. The
overlap check and the write happen in the same session and are committed
together, but two concurrent requests may still both pass the check before
either commits.
"""
import logging
from sqlalchemy.orm import Session
from app.models.booking import Booking, Participant
from app.utils.errors import InvalidState, NotFound, Conflict
from app.utils.loaders import load_booking
from app.utils.permissions import get_room, require_admin
from app.utils.scheduler import has_conflict, validate_interval
from app.utils.time_helpers import utcnow

logger = logging.getLogger(__name__)


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = load_booking(db, booking_id)
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFound("Booking not found")
    return booking


def participant_count(db: Session, booking_id: int) -> int:
    return db.query(Participant).filter(Participant.booking_id == booking_id).count()


def create_booking(
    db: Session,
    room_id: int,
    user_id: int,
    start_time,
    end_time,
    description=None,
    now=None,
) -> Booking:
    """Create a booking in a room on behalf of one of its admins."""
    if now is None:
        now = utcnow()

    get_room(db, room_id)
    require_admin(db, room_id, user_id, detail="Only admins can create bookings")

    validate_interval(start_time, end_time)
    if start_time < now:
        logger.error(f"Refused booking in the past for room_id: {room_id}, start: {start_time}")
        raise InvalidState("Cannot create booking in the past")

    if has_conflict(db, room_id, start_time, end_time):
        logger.error(
            f"Overlapping booking found for room_id: {room_id}, time: {start_time} to {end_time}"
        )
        raise Conflict("Time slot is already booked")

    db_booking = Booking(
        room_id=room_id,
        user_id=user_id,
        start_time=start_time,
        end_time=end_time,
        description=description,
    )
    db.add(db_booking)
    db.commit()
    logger.debug(f"Created booking: {db_booking.id}, room_id: {room_id}")
    return get_booking_or_404(db, db_booking.id)


def update_booking(db: Session, booking_id: int, user_id: int, changes: dict) -> Booking:
    """
    Apply `changes` to a booking.

    `changes` holds only the fields the caller supplied. A field supplied as
    None for `start_time` or `end_time` keeps the current value. Rescheduling
    is refused while the booking has participants; a description-only change
    is always accepted.
    """
    db_booking = get_booking_or_404(db, booking_id)
    require_admin(
        db, db_booking.room_id, user_id, detail="Only admins can update bookings"
    )

    new_start = changes.get("start_time")
    new_end = changes.get("end_time")
    if new_start is not None or new_end is not None:
        if participant_count(db, booking_id) > 0:
            logger.error(f"Refused to reschedule booking {booking_id} with participants")
            raise InvalidState(
                "Cannot change the time of a booking with participants, remove them first"
            )

        start_time = new_start or db_booking.start_time
        end_time = new_end or db_booking.end_time
        validate_interval(start_time, end_time)

        if has_conflict(
            db, db_booking.room_id, start_time, end_time, exclude_booking_id=booking_id
        ):
            logger.error(
                f"Overlapping booking found for room_id: {db_booking.room_id}, time: {start_time} to {end_time}"
            )
            raise Conflict("Time slot is already booked")

        db_booking.start_time = start_time
        db_booking.end_time = end_time

    if "description" in changes:
        db_booking.description = changes["description"]

    db.commit()
    logger.debug(f"Updated booking: {booking_id}")
    return get_booking_or_404(db, booking_id)


def delete_booking(db: Session, booking_id: int, user_id: int):
    """Delete a booking whatever its state or participants."""
    db_booking = get_booking_or_404(db, booking_id)
    require_admin(
        db, db_booking.room_id, user_id, detail="Only admins can delete bookings"
    )
    db.delete(db_booking)
    db.commit()
    logger.debug(f"Deleted booking: {booking_id}")
