from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.models.reply_models import ReplyType


class ReplyCreate(BaseModel):
    notice_id: str
    message: str = Field(..., min_length=1, max_length=5000)
    reply_type: ReplyType = ReplyType.REPLY
    parent_reply_id: Optional[str] = None

    @field_validator("message")
    @classmethod
    def strip_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message must not be empty")
        return value


class ReplyUpdate(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message must not be empty")
        return value


class ReplyRecipientResponse(BaseModel):
    user_id: str
    user_name: Optional[str] = None
    user_role: Optional[str] = None
    is_read: bool

    class Config:
        from_attributes = True


class ReplyResponse(BaseModel):
    id: str
    notice_id: str
    notice_title: Optional[str] = None
    notice_sender_id: Optional[str] = None

    sender_id: str
    sender_name: Optional[str] = None
    sender_role: Optional[str] = None

    message: str
    reply_type: ReplyType
    parent_reply_id: Optional[str] = None

    recipients: List[ReplyRecipientResponse] = []

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MyRepliesResponse(BaseModel):
    replies: List[ReplyResponse]
    unread_count: int
