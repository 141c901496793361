import uuid
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Text,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class NoticeType(str, enum.Enum):
    ALL = "ALL"
    FACULTY = "FACULTY"
    CLASS = "CLASS"
    SECTION = "SECTION"

    @property
    def is_targeted(self) -> bool:
        return self in (NoticeType.CLASS, NoticeType.SECTION)


@dataclass(frozen=True)
class ClassTarget:
    class_id: str


@dataclass(frozen=True)
class SectionTarget:
    section_id: str


RecipientTarget = Union[ClassTarget, SectionTarget]


class Notice(Base):
    __tablename__ = "notices"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)

    notice_type = Column(SAEnum(NoticeType, name="notice_type"), nullable=False, index=True)

    sent_by = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    sender = relationship("User", foreign_keys=[sent_by])

    recipients = relationship(
        "NoticeRecipient",
        back_populates="notice",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    attachments = relationship(
        "NoticeAttachment",
        back_populates="notice",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="NoticeAttachment.created_at.asc()",
    )
    replies = relationship(
        "Reply",
        back_populates="notice",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def sender_name(self) -> str | None:
        return self.sender.name if self.sender else None

    @property
    def sender_role(self) -> str | None:
        return self.sender.role.value if self.sender else None

    @property
    def targets(self) -> list[RecipientTarget]:
        return [r.target for r in self.recipients]


class NoticeRecipient(Base):
    __tablename__ = "notice_recipients"

    id = Column(Integer, primary_key=True, autoincrement=True)

    notice_id = Column(String(36), ForeignKey("notices.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=True, index=True)
    section_id = Column(String(36), ForeignKey("sections.id", ondelete="CASCADE"), nullable=True, index=True)

    notice = relationship("Notice", back_populates="recipients")
    school_class = relationship("SchoolClass", foreign_keys=[class_id])
    section = relationship("Section", foreign_keys=[section_id])

    __table_args__ = (
        CheckConstraint(
            "(class_id IS NOT NULL AND section_id IS NULL) OR "
            "(class_id IS NULL AND section_id IS NOT NULL)",
            name="ck_notice_recipient_exactly_one_target",
        ),
    )

    @classmethod
    def from_target(cls, target: RecipientTarget) -> "NoticeRecipient":
        if isinstance(target, ClassTarget):
            return cls(class_id=target.class_id)
        return cls(section_id=target.section_id)

    @property
    def target(self) -> RecipientTarget:
        if self.class_id is not None:
            return ClassTarget(self.class_id)
        return SectionTarget(self.section_id)

    @property
    def class_name(self) -> str | None:
        return self.school_class.name if self.school_class else None

    @property
    def section_name(self) -> str | None:
        return self.section.name if self.section else None

    @property
    def section_display_name(self) -> str | None:
        return self.section.display_name if self.section else None


class NoticeAttachment(Base):
    __tablename__ = "notice_attachments"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    notice_id = Column(String(36), ForeignKey("notices.id", ondelete="CASCADE"), nullable=False, index=True)

    filename = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    notice = relationship("Notice", back_populates="attachments")
