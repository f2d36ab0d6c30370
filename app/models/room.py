import enum
from sqlalchemy.orm import relationship
from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from app.db import Base
from app.utils.time_helpers import utcnow


class RoomRole(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    created_by = relationship("User")
    members = relationship(
        "RoomMembership", back_populates="room", cascade="all, delete-orphan"
    )
    bookings = relationship(
        "Booking",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="Booking.start_time",
    )

    @property
    def booking_count(self):
        return len(self.bookings)


class RoomMembership(Base):
    __tablename__ = "room_memberships"
    __table_args__ = (UniqueConstraint("room_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(Enum(RoomRole), nullable=False, default=RoomRole.USER)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    room = relationship("Room", back_populates="members")
    user = relationship("User", back_populates="memberships")
