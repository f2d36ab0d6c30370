import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from app.models.booking import Booking, Participant
from app.utils.errors import Conflict, InvalidState, NotFound
from app.utils.permissions import require_member
from app.utils.time_helpers import utcnow

logger = logging.getLogger(__name__)


def get_participant(db: Session, booking_id: int, user_id: int):
    return (
        db.query(Participant)
        .filter(Participant.booking_id == booking_id, Participant.user_id == user_id)
        .first()
    )


def join_booking(db: Session, booking_id: int, user_id: int, now=None) -> Participant:
    """
    Add the caller to the participants of an active booking.

    Any member of the booking's room may join, once, between the booking's
    start (inclusive) and its end (exclusive).
    """
    if now is None:
        now = utcnow()

    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFound("Booking not found")

    require_member(
        db,
        booking.room_id,
        user_id,
        detail="You must be a member of this room to join the booking",
    )

    if get_participant(db, booking_id, user_id) is not None:
        logger.error(f"User {user_id} already joined booking {booking_id}")
        raise Conflict("You have already joined this booking")

    if now < booking.start_time:
        raise InvalidState("Booking has not started yet")
    if now >= booking.end_time:
        raise InvalidState("Booking has already ended")

    participant = Participant(booking_id=booking_id, user_id=user_id)
    db.add(participant)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.error(f"User {user_id} joined booking {booking_id} concurrently")
        raise Conflict("You have already joined this booking")

    logger.debug(f"User {user_id} joined booking {booking_id}")
    return (
        db.query(Participant)
        .options(selectinload(Participant.user))
        .filter(Participant.id == participant.id)
        .first()
    )


def leave_booking(db: Session, booking_id: int, user_id: int):
    """Remove the caller from the participants of a booking, whatever its state."""
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFound("Booking not found")

    participant = get_participant(db, booking_id, user_id)
    if participant is None:
        logger.error(f"User {user_id} is not a participant of booking {booking_id}")
        raise NotFound("You are not a participant of this booking")

    db.delete(participant)
    db.commit()
    logger.debug(f"User {user_id} left booking {booking_id}")
