from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime as DateTime

class BookingCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    datetime: DateTime
    people: str = Field(..., min_length=1)
    message: Optional[str] = None

    @field_validator("name", "people", "message")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return v
        return v.strip()

    @field_validator("name", "people")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

class BookingOut(BaseModel):
    id: str
    name: str
    email: str
    datetime: DateTime
    people: str
    message: Optional[str] = None
    user: str
    created_at: Optional[DateTime] = None

class BookingCreated(BaseModel):
    success: bool = True
    msg: str
    booking: BookingOut
