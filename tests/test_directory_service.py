import unittest

from app.core.exceptions import BadRequest, Conflict, ForbiddenRole, NotFound
from app.models.class_models import FacultyClass, FacultySection, Section
from app.models.notice_models import NoticeType
from app.models.user_models import User, UserRole
from app.schemas.class_schemas import (
    ClassCreate,
    FacultyClassAssignment,
    FacultySectionAssignment,
    SectionCreate,
)
from app.schemas.user_schemas import UserCreate, UserUpdate
from app.services.dashboard_service import admin_dashboard, faculty_dashboard
from app.services.directory_service import (
    assign_faculty_class,
    assign_faculty_section,
    create_class,
    create_section,
    create_user,
    delete_class,
    get_faculty_students,
    list_sections,
    normalize_membership,
    remove_faculty_class,
    remove_faculty_section,
    update_user,
)
from app.utils.hashing import verify_password

from db_case import DatabaseTestCase


class MembershipTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.c2 = self.make_class("Class Two")
        self.s1 = self.make_section(self.c1, "A")

    def test_non_students_never_keep_membership(self):
        for role in (UserRole.admin, UserRole.faculty):
            self.assertEqual(normalize_membership(self.db, role, self.c1.id, self.s1.id), (None, None))

    def test_section_fills_in_its_class(self):
        self.assertEqual(
            normalize_membership(self.db, UserRole.student, None, self.s1.id),
            (self.c1.id, self.s1.id),
        )

    def test_section_must_belong_to_class(self):
        with self.assertRaises(BadRequest):
            normalize_membership(self.db, UserRole.student, self.c2.id, self.s1.id)
        with self.assertRaises(BadRequest):
            normalize_membership(self.db, UserRole.student, None, "missing")


class AdminDirectoryTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_user("Admin", UserRole.admin)
        self.faculty = self.make_user("Faculty", UserRole.faculty)
        self.c1 = self.make_class("Class One")
        self.s1 = self.make_section(self.c1, "A")

    def test_create_user_hashes_password_and_rejects_duplicates(self):
        payload = UserCreate(
            name="New Student",
            email="New.Student@School.edu",
            password="Secret1",
            role=UserRole.student,
            section_id=self.s1.id,
        )
        user = create_user(self.db, self.admin, payload)

        self.assertEqual(user.email, "new.student@school.edu")
        self.assertEqual(user.class_id, self.c1.id)
        self.assertTrue(verify_password("Secret1", user.password))

        with self.assertRaises(Conflict):
            create_user(self.db, self.admin, payload)

    def test_promoting_student_clears_membership(self):
        student = self.make_user("Student", school_class=self.c1, section=self.s1)
        updated = update_user(self.db, self.admin, student.id, UserUpdate(role=UserRole.faculty))
        self.assertIsNone(updated.class_id)
        self.assertIsNone(updated.section_id)

    def test_demoting_faculty_drops_assignments(self):
        self.assign_class(self.faculty, self.c1)
        self.assign_section(self.faculty, self.s1)

        updated = update_user(
            self.db, self.admin, self.faculty.id, UserUpdate(role=UserRole.student, class_id=self.c1.id)
        )

        self.assertEqual(updated.class_id, self.c1.id)
        self.assertEqual(self.db.query(FacultyClass).count(), 0)
        self.assertEqual(self.db.query(FacultySection).count(), 0)

    def test_non_admin_cannot_manage_directory(self):
        with self.assertRaises(ForbiddenRole):
            create_class(self.db, self.faculty, ClassCreate(name="Class Nine"))
        with self.assertRaises(ForbiddenRole):
            create_user(
                self.db,
                self.faculty,
                UserCreate(name="Someone", email="someone@school.edu", password="Secret1", role=UserRole.student),
            )

    def test_class_and_section_uniqueness(self):
        with self.assertRaises(Conflict):
            create_class(self.db, self.admin, ClassCreate(name="Class One"))

        section = create_section(self.db, self.admin, SectionCreate(class_id=self.c1.id, name="B"))
        self.assertEqual(section.display_name, "Section B")
        with self.assertRaises(Conflict):
            create_section(self.db, self.admin, SectionCreate(class_id=self.c1.id, name="B"))
        with self.assertRaises(NotFound):
            create_section(self.db, self.admin, SectionCreate(class_id="missing", name="C"))

        self.assertEqual([s.name for s in list_sections(self.db, self.c1.id)], ["A", "B"])

    def test_deleting_class_removes_sections_and_clears_students(self):
        student = self.make_user("Student", school_class=self.c1, section=self.s1)
        delete_class(self.db, self.admin, self.c1.id)

        self.assertEqual(self.db.query(Section).count(), 0)
        refreshed = self.db.query(User).filter(User.id == student.id).one()
        self.assertIsNone(refreshed.class_id)
        self.assertIsNone(refreshed.section_id)

    def test_faculty_assignments(self):
        assignment = assign_faculty_class(
            self.db, self.admin, FacultyClassAssignment(faculty_id=self.faculty.id, class_id=self.c1.id)
        )
        self.assertEqual(assignment.class_id, self.c1.id)

        with self.assertRaises(Conflict):
            assign_faculty_class(
                self.db, self.admin, FacultyClassAssignment(faculty_id=self.faculty.id, class_id=self.c1.id)
            )

        student = self.make_user("Student", school_class=self.c1)
        with self.assertRaises(BadRequest):
            assign_faculty_section(
                self.db, self.admin, FacultySectionAssignment(faculty_id=student.id, section_id=self.s1.id)
            )

        self.assertEqual([u.id for u in get_faculty_students(self.db, self.faculty)], [student.id])

        remove_faculty_class(self.db, self.admin, self.faculty.id, self.c1.id)
        self.assertEqual(self.db.query(FacultyClass).count(), 0)
        with self.assertRaises(NotFound):
            remove_faculty_class(self.db, self.admin, self.faculty.id, self.c1.id)
        with self.assertRaises(NotFound):
            remove_faculty_section(self.db, self.admin, self.faculty.id, self.s1.id)


class DashboardTests(DatabaseTestCase):
    def test_admin_and_faculty_counts(self):
        admin = self.make_user("Admin", UserRole.admin)
        faculty = self.make_user("Faculty", UserRole.faculty)
        c1 = self.make_class("Class One")
        self.make_section(c1, "A")
        self.make_user("Student", school_class=c1)
        self.assign_class(faculty, c1)

        self.make_notice(admin, NoticeType.ALL)
        self.make_notice(admin, NoticeType.FACULTY)
        self.make_class_notice(faculty, c1)

        stats = admin_dashboard(self.db, admin)
        self.assertEqual((stats.users.admin, stats.users.faculty, stats.users.student), (1, 1, 1))
        self.assertEqual(stats.notices.total, 3)
        self.assertEqual(stats.notices.class_, 1)
        self.assertEqual(stats.notices.section, 0)
        self.assertEqual((stats.total_classes, stats.total_sections), (1, 1))
        self.assertIn('"class":1', stats.model_dump_json(by_alias=True))

        mine = faculty_dashboard(self.db, faculty)
        self.assertEqual((mine.my_notices, mine.my_classes, mine.total_students), (3, 1, 1))

        with self.assertRaises(ForbiddenRole):
            admin_dashboard(self.db, faculty)


if __name__ == "__main__":
    unittest.main()
