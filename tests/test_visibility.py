import unittest

from app.core.exceptions import AccessDenied
from app.models.notice_models import NoticeType, SectionTarget
from app.models.user_models import UserRole
from app.services.visibility_service import (
    FacultySectionVisibility,
    can_view_notice,
    count_visible_notices,
    ensure_can_view_notice,
    visible_notices_for,
)

from db_case import DatabaseTestCase


def ids(notices):
    return [n.id for n in notices]


class StudentVisibilityTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.c2 = self.make_class("Class Two")
        self.s1a = self.make_section(self.c1, "A")
        self.s1b = self.make_section(self.c1, "B")

        self.admin = self.make_user("Admin", UserRole.admin)
        self.faculty = self.make_user("Faculty", UserRole.faculty)
        self.student = self.make_user("Student", school_class=self.c1, section=self.s1a)
        self.loner = self.make_user("Loner")

        self.n_all = self.make_notice(self.admin, NoticeType.ALL, created_at=self.at(1))
        self.n_fac = self.make_notice(self.admin, NoticeType.FACULTY, created_at=self.at(2))
        self.n_c1 = self.make_class_notice(self.admin, self.c1, created_at=self.at(3))
        self.n_c2 = self.make_class_notice(self.admin, self.c2, created_at=self.at(4))
        self.n_s1a = self.make_notice(
            self.admin, NoticeType.SECTION, [SectionTarget(self.s1a.id)], created_at=self.at(5)
        )
        self.n_s1b = self.make_notice(
            self.admin, NoticeType.SECTION, [SectionTarget(self.s1b.id)], created_at=self.at(6)
        )

    def test_student_sees_all_own_class_and_own_section_newest_first(self):
        visible = visible_notices_for(self.db, self.student)
        self.assertEqual(ids(visible), [self.n_s1a.id, self.n_c1.id, self.n_all.id])

    def test_student_without_membership_sees_only_all(self):
        self.assertEqual(ids(visible_notices_for(self.db, self.loner)), [self.n_all.id])

    def test_all_notice_is_visible_to_every_role(self):
        for user in (self.admin, self.faculty, self.student, self.loner):
            self.assertIn(self.n_all.id, ids(visible_notices_for(self.db, user)))

    def test_admin_sees_everything(self):
        self.assertEqual(len(visible_notices_for(self.db, self.admin)), 6)
        self.assertEqual(count_visible_notices(self.db, self.admin), 6)

    def test_single_notice_check_mirrors_listing(self):
        visible = set(ids(visible_notices_for(self.db, self.student)))
        for notice in (self.n_all, self.n_fac, self.n_c1, self.n_c2, self.n_s1a, self.n_s1b):
            self.assertEqual(can_view_notice(self.db, self.student, notice), notice.id in visible)

        with self.assertRaises(AccessDenied):
            ensure_can_view_notice(self.db, self.student, self.n_c2)

    def test_paging(self):
        page = visible_notices_for(self.db, self.admin, skip=1, limit=2)
        self.assertEqual(ids(page), [self.n_s1a.id, self.n_c2.id])


class FacultyVisibilityTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.c2 = self.make_class("Class Two")
        self.s1 = self.make_section(self.c1, "A")
        self.s2 = self.make_section(self.c2, "A")

        self.admin = self.make_user("Admin", UserRole.admin)
        # owns class C1 but not section S1
        self.class_owner = self.make_user("Class Owner", UserRole.faculty)
        self.assign_class(self.class_owner, self.c1)
        # assigned to section S1 only
        self.section_owner = self.make_user("Section Owner", UserRole.faculty)
        self.assign_section(self.section_owner, self.s1)
        self.student = self.make_user("Student", school_class=self.c1, section=self.s1)

        self.n_s1 = self.make_notice(self.admin, NoticeType.SECTION, [SectionTarget(self.s1.id)])
        self.n_s2 = self.make_notice(self.admin, NoticeType.SECTION, [SectionTarget(self.s2.id)])

    def test_faculty_sees_faculty_notices_but_students_do_not(self):
        n_fac = self.make_notice(self.admin, NoticeType.FACULTY)
        self.assertTrue(can_view_notice(self.db, self.class_owner, n_fac))
        self.assertFalse(can_view_notice(self.db, self.student, n_fac))

    def test_faculty_sees_own_notices(self):
        own = self.make_class_notice(self.section_owner, self.c2)
        self.assertIn(own.id, ids(visible_notices_for(self.db, self.section_owner)))

    def test_faculty_sees_class_notices_for_assigned_classes(self):
        n_c1 = self.make_class_notice(self.admin, self.c1)
        n_c2 = self.make_class_notice(self.admin, self.c2)
        visible = ids(visible_notices_for(self.db, self.class_owner))
        self.assertIn(n_c1.id, visible)
        self.assertNotIn(n_c2.id, visible)

    def test_class_membership_policy(self):
        policy = FacultySectionVisibility.CLASS_MEMBERSHIP
        self.assertTrue(can_view_notice(self.db, self.class_owner, self.n_s1, policy))
        self.assertFalse(can_view_notice(self.db, self.section_owner, self.n_s1, policy))
        self.assertFalse(can_view_notice(self.db, self.class_owner, self.n_s2, policy))

        listed = ids(visible_notices_for(self.db, self.class_owner, section_policy=policy))
        self.assertEqual(listed, [self.n_s1.id])

    def test_assigned_sections_policy(self):
        policy = FacultySectionVisibility.ASSIGNED_SECTIONS
        self.assertFalse(can_view_notice(self.db, self.class_owner, self.n_s1, policy))
        self.assertTrue(can_view_notice(self.db, self.section_owner, self.n_s1, policy))

        listed = ids(visible_notices_for(self.db, self.section_owner, section_policy=policy))
        self.assertEqual(listed, [self.n_s1.id])
        self.assertEqual(visible_notices_for(self.db, self.class_owner, section_policy=policy), [])


if __name__ == "__main__":
    unittest.main()
