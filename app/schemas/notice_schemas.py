from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.models.notice_models import NoticeType


class NoticeRecipientIn(BaseModel):
    class_id: Optional[str] = None
    section_id: Optional[str] = None


class NoticeCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    message: str = Field(..., min_length=10)
    notice_type: NoticeType
    recipients: List[NoticeRecipientIn] = Field(default_factory=list)

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    message: Optional[str] = Field(None, min_length=10)
    notice_type: Optional[NoticeType] = None
    recipients: Optional[List[NoticeRecipientIn]] = None

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if value is not None else value


class NoticeRecipientResponse(BaseModel):
    class_id: Optional[str] = None
    section_id: Optional[str] = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None
    section_display_name: Optional[str] = None

    class Config:
        from_attributes = True


class AttachmentResponse(BaseModel):
    id: str
    notice_id: str
    filename: str
    original_filename: str
    file_type: Optional[str] = None
    file_size: int
    created_at: datetime

    class Config:
        from_attributes = True


class NoticeResponse(BaseModel):
    id: str
    title: str
    message: str
    notice_type: NoticeType

    sent_by: str
    sender_name: Optional[str] = None
    sender_role: Optional[str] = None

    recipients: List[NoticeRecipientResponse] = []
    attachments: List[AttachmentResponse] = []

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
