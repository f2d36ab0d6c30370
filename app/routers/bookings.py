from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.models.booking import Booking
from app.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    ParticipantResponse,
)
from app.utils import lifecycle, participants
from app.utils.auth import get_current_user
from app.utils.cleanup import sweep_ended_bookings
from app.utils.loaders import booking_options
from app.utils.permissions import get_room
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.get(
    "/my",
    response_model=List[BookingResponse],
    summary="List my bookings",
    description="Retrieve the bookings created by the authenticated user, ordered by start time.",
)
def get_my_bookings(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    sweep_ended_bookings(db)
    bookings = (
        db.query(Booking)
        .options(*booking_options())
        .filter(Booking.user_id == current_user["id"])
        .order_by(Booking.start_time)
        .all()
    )
    logger.debug(f"Retrieved {len(bookings)} bookings for user: {current_user['id']}")
    return bookings


@router.get(
    "/room/{room_id}",
    response_model=List[BookingResponse],
    summary="List bookings of a room",
    description="Retrieve all bookings of a room, ordered by start time.",
)
def get_room_bookings(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    sweep_ended_bookings(db)
    get_room(db, room_id)
    bookings = (
        db.query(Booking)
        .options(*booking_options())
        .filter(Booking.room_id == room_id)
        .order_by(Booking.start_time)
        .all()
    )
    logger.debug(f"Retrieved {len(bookings)} bookings for room_id: {room_id}")
    return bookings


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a specific booking by its ID.",
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    sweep_ended_bookings(db)
    booking = lifecycle.get_booking_or_404(db, booking_id)
    logger.debug(f"Retrieved booking: {booking_id}")
    return booking


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book a room for a time interval. Requires ADMIN role in the room.",
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Create a new booking.

    - **room_id**: ID of the room to book.
    - **start_time**: Start of the booking, not in the past.
    - **end_time**: End of the booking, after the start.
    - **description**: Optional free text.

    Fails with 409 if the interval overlaps another booking of the room.
    Back-to-back bookings are allowed.
    """
    logger.debug(f"Creating booking for user: {current_user['id']}, room_id: {booking.room_id}")
    return lifecycle.create_booking(
        db,
        room_id=booking.room_id,
        user_id=current_user["id"],
        start_time=booking.start_time,
        end_time=booking.end_time,
        description=booking.description,
    )


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Reschedule a booking or change its description. Requires ADMIN role in the room.",
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update a booking.

    - **start_time**: (Optional) New start time.
    - **end_time**: (Optional) New end time.
    - **description**: (Optional) New description.

    The time of a booking cannot change while it has participants.
    """
    return lifecycle.update_booking(
        db,
        booking_id,
        current_user["id"],
        booking_update.model_dump(exclude_unset=True),
    )


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Delete a booking. Requires ADMIN role in the room.",
)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    lifecycle.delete_booking(db, booking_id, current_user["id"])
    return None


@router.post(
    "/{booking_id}/join",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join a booking",
    description="Join an ongoing booking as a participant. Requires membership of the room.",
)
def join_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    sweep_ended_bookings(db)
    return participants.join_booking(db, booking_id, current_user["id"])


@router.delete(
    "/{booking_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave a booking",
    description="Stop participating in a booking.",
)
def leave_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    participants.leave_booking(db, booking_id, current_user["id"])
    return None
