from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from app.models.room import RoomRole
from app.schemas.booking import BookingResponse
from app.schemas.user import UserSummary
from app.utils.validation_helpers import email_normalizer, trailing_spaces_remover


class RoomBase(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    _normalize_name = field_validator("name", mode="before")(trailing_spaces_remover)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    _normalize_name = field_validator("name", mode="before")(trailing_spaces_remover)


class MemberAdd(BaseModel):
    user_email: str
    role: RoomRole

    _normalize_email = field_validator("user_email")(email_normalizer)


class MemberRoleUpdate(BaseModel):
    role: RoomRole


class MembershipResponse(BaseModel):
    id: int
    room_id: int
    user_id: int
    role: RoomRole
    created_at: datetime
    user: UserSummary

    model_config = ConfigDict(from_attributes=True)


class RoomResponse(RoomBase):
    id: int
    created_by_id: int
    created_at: datetime
    updated_at: datetime
    created_by: UserSummary
    members: List[MembershipResponse] = []
    booking_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class RoomDetailResponse(RoomResponse):
    bookings: List[BookingResponse] = []


class MyRoomResponse(BaseModel):
    id: int
    role: RoomRole
    created_at: datetime
    room: RoomResponse

    model_config = ConfigDict(from_attributes=True)
