import uuid
import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Text,
    Enum as SAEnum,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class ReplyType(str, enum.Enum):
    REPLY = "REPLY"
    REPLY_ALL = "REPLY_ALL"


class Reply(Base):
    __tablename__ = "notice_replies"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))

    notice_id = Column(String(36), ForeignKey("notices.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    reply_type = Column(SAEnum(ReplyType, name="reply_type"), nullable=False)

    # stored for threading, not used when resolving recipients
    parent_reply_id = Column(String(36), ForeignKey("notice_replies.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    notice = relationship("Notice", back_populates="replies")
    sender = relationship("User", foreign_keys=[sender_id])
    recipients = relationship(
        "ReplyRecipient",
        back_populates="reply",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_notice_replies_notice_id_created_at", "notice_id", "created_at"),)

    @property
    def sender_name(self) -> str | None:
        return self.sender.name if self.sender else None

    @property
    def sender_role(self) -> str | None:
        return self.sender.role.value if self.sender else None

    @property
    def notice_title(self) -> str | None:
        return self.notice.title if self.notice else None

    @property
    def notice_sender_id(self) -> str | None:
        return self.notice.sent_by if self.notice else None

    @property
    def recipient_ids(self) -> set[str]:
        return {r.user_id for r in self.recipients}


class ReplyRecipient(Base):
    __tablename__ = "notice_reply_recipients"

    id = Column(Integer, primary_key=True, autoincrement=True)

    reply_id = Column(String(36), ForeignKey("notice_replies.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reply = relationship("Reply", back_populates="recipients")
    user = relationship("User", foreign_keys=[user_id])

    __table_args__ = (UniqueConstraint("reply_id", "user_id", name="uq_reply_recipient"),)

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user else None

    @property
    def user_role(self) -> str | None:
        return self.user.role.value if self.user else None
