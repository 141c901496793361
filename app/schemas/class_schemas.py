from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, pattern=r"^[a-zA-Z0-9\s\-]+$")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class ClassResponse(BaseModel):
    id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class SectionCreate(BaseModel):
    class_id: str
    name: str = Field(..., min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)


class SectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)


class SectionResponse(BaseModel):
    id: str
    class_id: str
    class_name: Optional[str] = None
    name: str
    display_name: str
    created_at: datetime

    class Config:
        from_attributes = True


class FacultyClassAssignment(BaseModel):
    faculty_id: str
    class_id: str


class FacultySectionAssignment(BaseModel):
    faculty_id: str
    section_id: str


class AssignmentResponse(BaseModel):
    id: str
    faculty_id: str
    class_id: Optional[str] = None
    section_id: Optional[str] = None

    class Config:
        from_attributes = True
