from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user_models import UserRole


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole

    class_id: Optional[str] = None
    section_id: Optional[str] = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None
    section_display_name: Optional[str] = None

    created_at: datetime

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    class_id: Optional[str] = None
    section_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    class_id: Optional[str] = None
    section_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value):
        return value.lower() if value else value


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value):
        return value.lower() if value else value
