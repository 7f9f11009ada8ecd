from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    @field_validator("name", "subject", "message")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter all fields")
        return v

class ContactOut(BaseModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    created_at: Optional[datetime] = None

class ContactCreated(BaseModel):
    success: bool = True
    msg: str
    contact: ContactOut
