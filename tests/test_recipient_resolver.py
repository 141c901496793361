import unittest

from app.core.exceptions import ForbiddenScope, InvalidScope, NotFound
from app.models.notice_models import ClassTarget, NoticeType, SectionTarget
from app.models.user_models import UserRole
from app.services.recipient_resolver import (
    build_targets,
    ensure_targets_exist,
    resolve_recipient_user_ids,
    validate_sender_scope,
)

from db_case import DatabaseTestCase


class BuildTargetsTests(unittest.TestCase):
    def test_broadcast_types_drop_recipient_rows(self):
        rows = [{"class_id": "c1"}]
        self.assertEqual(build_targets(NoticeType.ALL, rows), [])
        self.assertEqual(build_targets(NoticeType.FACULTY, rows), [])

    def test_targeted_type_without_rows_is_invalid(self):
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.CLASS, [])
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.SECTION, None)

    def test_row_must_set_exactly_one_id(self):
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.CLASS, [{"class_id": None, "section_id": None}])
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.CLASS, [{"class_id": "c1", "section_id": "s1"}])

    def test_row_kind_must_match_notice_type(self):
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.CLASS, [{"section_id": "s1"}])
        with self.assertRaises(InvalidScope):
            build_targets(NoticeType.SECTION, [{"class_id": "c1"}])

    def test_duplicate_rows_collapse_in_order(self):
        targets = build_targets(
            NoticeType.CLASS,
            [{"class_id": "c2"}, {"class_id": "c1"}, {"class_id": "c2"}],
        )
        self.assertEqual(targets, [ClassTarget("c2"), ClassTarget("c1")])

    def test_blank_strings_count_as_unset(self):
        targets = build_targets(NoticeType.SECTION, [{"class_id": " ", "section_id": "s1"}])
        self.assertEqual(targets, [SectionTarget("s1")])


class ResolveRecipientsTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.c2 = self.make_class("Class Two")
        self.s1a = self.make_section(self.c1, "A")
        self.s1b = self.make_section(self.c1, "B")

        self.admin = self.make_user("Admin", UserRole.admin)
        self.f1 = self.make_user("Faculty One", UserRole.faculty)
        self.f2 = self.make_user("Faculty Two", UserRole.faculty)
        self.st1 = self.make_user("Student One", school_class=self.c1, section=self.s1a)
        self.st2 = self.make_user("Student Two", school_class=self.c1, section=self.s1b)
        self.st3 = self.make_user("Student Three", school_class=self.c2)

    def test_all_reaches_every_user(self):
        notice = self.make_notice(self.admin, NoticeType.ALL)
        everyone = {u.id for u in (self.admin, self.f1, self.f2, self.st1, self.st2, self.st3)}
        self.assertEqual(resolve_recipient_user_ids(self.db, notice), everyone)

    def test_faculty_notice_reaches_faculty_plus_sender(self):
        notice = self.make_notice(self.admin, NoticeType.FACULTY)
        self.assertEqual(
            resolve_recipient_user_ids(self.db, notice),
            {self.admin.id, self.f1.id, self.f2.id},
        )

    def test_class_notice_reaches_class_members_plus_sender(self):
        notice = self.make_class_notice(self.f1, self.c1)
        self.assertEqual(
            resolve_recipient_user_ids(self.db, notice),
            {self.f1.id, self.st1.id, self.st2.id},
        )

    def test_class_notice_unions_several_classes(self):
        notice = self.make_class_notice(self.f1, self.c1, self.c2)
        self.assertEqual(
            resolve_recipient_user_ids(self.db, notice),
            {self.f1.id, self.st1.id, self.st2.id, self.st3.id},
        )

    def test_section_notice_reaches_section_members_plus_sender(self):
        notice = self.make_notice(self.f2, NoticeType.SECTION, [SectionTarget(self.s1b.id)])
        self.assertEqual(resolve_recipient_user_ids(self.db, notice), {self.f2.id, self.st2.id})

    def test_resolution_is_idempotent(self):
        notice = self.make_class_notice(self.f1, self.c1)
        first = resolve_recipient_user_ids(self.db, notice)
        self.assertEqual(first, resolve_recipient_user_ids(self.db, notice))

    def test_unknown_targets_are_not_found(self):
        ensure_targets_exist(self.db, [ClassTarget(self.c1.id), SectionTarget(self.s1a.id)])
        with self.assertRaises(NotFound):
            ensure_targets_exist(self.db, [ClassTarget("missing-class")])
        with self.assertRaises(NotFound):
            ensure_targets_exist(self.db, [SectionTarget("missing-section")])


class SenderScopeTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.s1 = self.make_section(self.c1, "A")
        self.faculty = self.make_user("Faculty", UserRole.faculty)
        self.admin = self.make_user("Admin", UserRole.admin)

    def test_class_outside_assignments_is_forbidden_until_assigned(self):
        targets = [ClassTarget(self.c1.id)]
        with self.assertRaises(ForbiddenScope):
            validate_sender_scope(self.db, self.faculty, NoticeType.CLASS, targets)

        self.assign_class(self.faculty, self.c1)
        validate_sender_scope(self.db, self.faculty, NoticeType.CLASS, targets)

    def test_section_scope_uses_explicit_section_assignments(self):
        targets = [SectionTarget(self.s1.id)]
        # owning the class is not enough to send to its sections
        self.assign_class(self.faculty, self.c1)
        with self.assertRaises(ForbiddenScope):
            validate_sender_scope(self.db, self.faculty, NoticeType.SECTION, targets)

        self.assign_section(self.faculty, self.s1)
        validate_sender_scope(self.db, self.faculty, NoticeType.SECTION, targets)

    def test_admin_and_broadcast_types_bypass_scope(self):
        validate_sender_scope(self.db, self.admin, NoticeType.CLASS, [ClassTarget(self.c1.id)])
        validate_sender_scope(self.db, self.faculty, NoticeType.ALL, [])


if __name__ == "__main__":
    unittest.main()
