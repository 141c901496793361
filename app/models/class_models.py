import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.database import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sections = relationship(
        "Section",
        back_populates="school_class",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Section.name",
    )


class Section(Base):
    __tablename__ = "sections"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(50), nullable=False)
    display_name = Column(String(100), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    school_class = relationship("SchoolClass", back_populates="sections")

    __table_args__ = (UniqueConstraint("class_id", "name", name="uq_sections_class_name"),)

    @property
    def class_name(self) -> str | None:
        return self.school_class.name if self.school_class else None


class FacultyClass(Base):
    __tablename__ = "faculty_classes"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    faculty_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("faculty_id", "class_id", name="uq_faculty_classes"),)


class FacultySection(Base):
    __tablename__ = "faculty_sections"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    faculty_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(String(36), ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("faculty_id", "section_id", name="uq_faculty_sections"),)
