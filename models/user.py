from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

ROLES = ("guest", "admin")

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: str = "guest"
    created_at: Optional[datetime] = None

class TokenOut(BaseModel):
    token: str
