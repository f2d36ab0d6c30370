import logging
from sqlalchemy.orm import Session
from app.models.booking import Booking, Participant
from app.utils.time_helpers import utcnow

logger = logging.getLogger(__name__)


def sweep_ended_bookings(db: Session, now=None) -> int:
    """
    Remove the participants of every booking that has ended.

    Called before reads so that an ended booking is never returned with
    participants. Returns the number of participant rows removed. Failures are
    logged and reported as 0 so that they never block the read.
    """
    if now is None:
        now = utcnow()
    try:
        ended_booking_ids = [
            booking_id
            for (booking_id,) in db.query(Booking.id)
            .filter(Booking.end_time <= now, Booking.participants.any())
            .all()
        ]
        if not ended_booking_ids:
            return 0

        removed = (
            db.query(Participant)
            .filter(Participant.booking_id.in_(ended_booking_ids))
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:  # pylint: disable=broad-except
        db.rollback()
        logger.exception("Error cleaning up ended bookings")
        return 0

    logger.debug(
        f"Removed {removed} participants from {len(ended_booking_ids)} ended bookings"
    )
    return removed
