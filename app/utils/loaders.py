"""Eager-loading options used to shape room and booking responses."""
from sqlalchemy.orm import selectinload
from app.models.booking import Booking, Participant
from app.models.room import Room, RoomMembership


def booking_options():
    return [
        selectinload(Booking.user),
        selectinload(Booking.room),
        selectinload(Booking.participants).selectinload(Participant.user),
    ]


def room_options(with_bookings: bool = False):
    options = [
        selectinload(Room.created_by),
        selectinload(Room.members).selectinload(RoomMembership.user),
        selectinload(Room.bookings),
    ]
    if with_bookings:
        options += [
            selectinload(Room.bookings).selectinload(Booking.user),
            selectinload(Room.bookings)
            .selectinload(Booking.participants)
            .selectinload(Participant.user),
        ]
    return options


def load_booking(db, booking_id: int):
    return (
        db.query(Booking)
        .options(*booking_options())
        .filter(Booking.id == booking_id)
        .first()
    )


def load_room(db, room_id: int, with_bookings: bool = False):
    return (
        db.query(Room)
        .options(*room_options(with_bookings))
        .filter(Room.id == room_id)
        .first()
    )
