from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.utils.validation_helpers import email_normalizer, trailing_spaces_remover


class UserCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str
    password: str = Field(min_length=6)

    _normalize_name = field_validator("name", mode="before")(trailing_spaces_remover)
    _normalize_email = field_validator("email")(email_normalizer)


class UserLogin(BaseModel):
    email: str
    password: str = Field(min_length=1)

    _normalize_email = field_validator("email")(email_normalizer)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
