from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Optional
from app.schemas.user import UserSummary
from app.utils.time_helpers import BookingState
from app.utils.validation_helpers import normalize_datetime


class BookingBase(BaseModel):
    start_time: datetime
    end_time: datetime
    description: Optional[str] = Field(default=None, max_length=1000)

    _normalize_times = field_validator("start_time", "end_time")(normalize_datetime)


class BookingCreate(BookingBase):
    room_id: int


class BookingUpdate(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    description: Optional[str] = Field(default=None, max_length=1000)

    _normalize_times = field_validator("start_time", "end_time")(normalize_datetime)


class BookingRoom(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ParticipantResponse(BaseModel):
    id: int
    booking_id: int
    user_id: int
    created_at: datetime
    user: UserSummary

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    id: int
    room_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    state: BookingState
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    room: BookingRoom
    participants: List[ParticipantResponse] = []

    model_config = ConfigDict(from_attributes=True)
