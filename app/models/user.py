from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.db import Base
from app.utils.time_helpers import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    memberships = relationship(
        "RoomMembership", back_populates="user", cascade="all, delete-orphan"
    )
    bookings = relationship("Booking", back_populates="user")
    participations = relationship(
        "Participant", back_populates="user", cascade="all, delete-orphan"
    )
