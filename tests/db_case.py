import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import app.main  # noqa: F401  registers every model on Base.metadata
from app.db.database import Base
from app.models.class_models import FacultyClass, FacultySection, SchoolClass, Section
from app.models.notice_models import ClassTarget, Notice, NoticeRecipient, NoticeType
from app.models.user_models import User, UserRole
from app.utils.hashing import get_password_hash

PASSWORD = "Passw0rd"
PASSWORD_HASH = get_password_hash(PASSWORD)


class DatabaseTestCase(unittest.TestCase):
    """Temp-file SQLite database shared by a test class, emptied before each test."""

    @classmethod
    def setUpClass(cls):
        cls._tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(cls._tmpdir.name) / f"{cls.__name__}.db"
        cls._engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
        cls._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=cls._engine)
        Base.metadata.create_all(bind=cls._engine)

    @classmethod
    def tearDownClass(cls):
        cls._engine.dispose()
        cls._tmpdir.cleanup()

    def setUp(self):
        db = self._session_factory()
        try:
            for table in reversed(Base.metadata.sorted_tables):
                db.execute(table.delete())
            db.commit()
        finally:
            db.close()
        self.db = self._session_factory()

    def tearDown(self):
        self.db.close()

    # -------------------------
    # seed helpers
    # -------------------------
    def make_user(self, name, role=UserRole.student, school_class=None, section=None):
        user = User(
            name=name,
            email=f"{name.lower().replace(' ', '.')}@school.edu",
            password=PASSWORD_HASH,
            role=role,
            class_id=school_class.id if school_class else None,
            section_id=section.id if section else None,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def make_class(self, name):
        school_class = SchoolClass(name=name)
        self.db.add(school_class)
        self.db.commit()
        self.db.refresh(school_class)
        return school_class

    def make_section(self, school_class, name):
        section = Section(class_id=school_class.id, name=name, display_name=f"Section {name}")
        self.db.add(section)
        self.db.commit()
        self.db.refresh(section)
        return section

    def assign_class(self, faculty, school_class):
        self.db.add(FacultyClass(faculty_id=faculty.id, class_id=school_class.id))
        self.db.commit()

    def assign_section(self, faculty, section):
        self.db.add(FacultySection(faculty_id=faculty.id, section_id=section.id))
        self.db.commit()

    def make_notice(self, sender, notice_type=NoticeType.ALL, targets=(), title="Notice", created_at=None):
        notice = Notice(
            title=title,
            message="A notice message for everyone involved.",
            notice_type=notice_type,
            sent_by=sender.id,
        )
        if created_at is not None:
            notice.created_at = created_at
        notice.recipients = [NoticeRecipient.from_target(t) for t in targets]
        self.db.add(notice)
        self.db.commit()
        self.db.refresh(notice)
        return notice

    def make_class_notice(self, sender, *classes, **kwargs):
        targets = [ClassTarget(c.id) for c in classes]
        return self.make_notice(sender, NoticeType.CLASS, targets, **kwargs)

    @staticmethod
    def at(hour):
        return datetime(2026, 1, 1, hour, 0, 0)
