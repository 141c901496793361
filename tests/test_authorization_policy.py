import unittest

from app.core.exceptions import ForbiddenOwnership, ForbiddenRole, ForbiddenScope
from app.models.notice_models import ClassTarget, NoticeType
from app.models.reply_models import Reply, ReplyType
from app.models.user_models import UserRole
from app.services.authorization_policy import (
    authorize_create_notice,
    authorize_create_reply,
    authorize_delete_reply,
    authorize_manage_directory,
    authorize_modify_notice,
    authorize_update_reply,
)

from db_case import DatabaseTestCase


class AuthorizationPolicyTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.c1 = self.make_class("Class One")
        self.c2 = self.make_class("Class Two")
        self.admin = self.make_user("Admin", UserRole.admin)
        self.faculty = self.make_user("Faculty", UserRole.faculty)
        self.other_faculty = self.make_user("Other Faculty", UserRole.faculty)
        self.student = self.make_user("Student", school_class=self.c1)
        self.assign_class(self.faculty, self.c1)

    def test_broadcast_notices_are_admin_only(self):
        for notice_type in (NoticeType.ALL, NoticeType.FACULTY):
            authorize_create_notice(self.db, self.admin, notice_type, [])
            with self.assertRaises(ForbiddenRole):
                authorize_create_notice(self.db, self.faculty, notice_type, [])
            with self.assertRaises(ForbiddenRole):
                authorize_create_notice(self.db, self.student, notice_type, [])

    def test_targeted_notices_respect_faculty_scope(self):
        authorize_create_notice(self.db, self.admin, NoticeType.CLASS, [ClassTarget(self.c2.id)])
        authorize_create_notice(self.db, self.faculty, NoticeType.CLASS, [ClassTarget(self.c1.id)])
        with self.assertRaises(ForbiddenScope):
            authorize_create_notice(
                self.db,
                self.faculty,
                NoticeType.CLASS,
                [ClassTarget(self.c1.id), ClassTarget(self.c2.id)],
            )
        with self.assertRaises(ForbiddenRole):
            authorize_create_notice(self.db, self.student, NoticeType.CLASS, [ClassTarget(self.c1.id)])

    def test_modify_notice_requires_ownership(self):
        notice = self.make_class_notice(self.faculty, self.c1)

        authorize_modify_notice(self.admin, notice)
        authorize_modify_notice(self.faculty, notice)
        with self.assertRaises(ForbiddenOwnership):
            authorize_modify_notice(self.other_faculty, notice)
        with self.assertRaises(ForbiddenRole):
            authorize_modify_notice(self.student, notice)

    def test_reply_rules_are_role_independent(self):
        notice = self.make_class_notice(self.faculty, self.c1)
        reply = Reply(notice_id=notice.id, sender_id=self.student.id, message="hi", reply_type=ReplyType.REPLY)
        self.db.add(reply)
        self.db.commit()

        authorize_create_reply(self.student, notice)
        with self.assertRaises(ForbiddenOwnership):
            authorize_create_reply(self.faculty, notice)

        authorize_update_reply(self.student, reply)
        for actor in (self.admin, self.faculty):
            with self.assertRaises(ForbiddenOwnership):
                authorize_update_reply(actor, reply)

        for actor in (self.admin, self.faculty, self.student):
            authorize_delete_reply(actor, reply)
        with self.assertRaises(ForbiddenOwnership):
            authorize_delete_reply(self.other_faculty, reply)

    def test_directory_management_is_admin_only(self):
        authorize_manage_directory(self.admin)
        for actor in (self.faculty, self.student):
            with self.assertRaises(ForbiddenRole):
                authorize_manage_directory(actor)


if __name__ == "__main__":
    unittest.main()
