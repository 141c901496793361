"""initial notice board schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from alembic import op
import sqlalchemy as sa


revision = '20261019_0001'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('admin', 'faculty', 'student', name='user_role')
notice_type = sa.Enum('ALL', 'FACULTY', 'CLASS', 'SECTION', name='notice_type')
reply_type = sa.Enum('REPLY', 'REPLY_ALL', name='reply_type')


def upgrade() -> None:
    op.create_table(
        'classes',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])

    op.create_table(
        'sections',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('class_id', 'name', name='uq_sections_class_name'),
    )
    op.create_index('ix_sections_id', 'sections', ['id'])
    op.create_index('ix_sections_class_id', 'sections', ['class_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('section_id', sa.String(length=36), sa.ForeignKey('sections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_class_id', 'users', ['class_id'])
    op.create_index('ix_users_section_id', 'users', ['section_id'])

    op.create_table(
        'faculty_classes',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('faculty_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('faculty_id', 'class_id', name='uq_faculty_classes'),
    )
    op.create_index('ix_faculty_classes_id', 'faculty_classes', ['id'])
    op.create_index('ix_faculty_classes_faculty_id', 'faculty_classes', ['faculty_id'])
    op.create_index('ix_faculty_classes_class_id', 'faculty_classes', ['class_id'])

    op.create_table(
        'faculty_sections',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('faculty_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('section_id', sa.String(length=36), sa.ForeignKey('sections.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('faculty_id', 'section_id', name='uq_faculty_sections'),
    )
    op.create_index('ix_faculty_sections_id', 'faculty_sections', ['id'])
    op.create_index('ix_faculty_sections_faculty_id', 'faculty_sections', ['faculty_id'])
    op.create_index('ix_faculty_sections_section_id', 'faculty_sections', ['section_id'])

    op.create_table(
        'notices',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('notice_type', notice_type, nullable=False),
        sa.Column('sent_by', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notices_id', 'notices', ['id'])
    op.create_index('ix_notices_notice_type', 'notices', ['notice_type'])
    op.create_index('ix_notices_sent_by', 'notices', ['sent_by'])
    op.create_index('ix_notices_created_at', 'notices', ['created_at'])

    op.create_table(
        'notice_recipients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('notice_id', sa.String(length=36), sa.ForeignKey('notices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('class_id', sa.String(length=36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=True),
        sa.Column('section_id', sa.String(length=36), sa.ForeignKey('sections.id', ondelete='CASCADE'), nullable=True),
        sa.CheckConstraint(
            '(class_id IS NOT NULL AND section_id IS NULL) OR '
            '(class_id IS NULL AND section_id IS NOT NULL)',
            name='ck_notice_recipient_exactly_one_target',
        ),
    )
    op.create_index('ix_notice_recipients_notice_id', 'notice_recipients', ['notice_id'])
    op.create_index('ix_notice_recipients_class_id', 'notice_recipients', ['class_id'])
    op.create_index('ix_notice_recipients_section_id', 'notice_recipients', ['section_id'])

    op.create_table(
        'notice_attachments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('notice_id', sa.String(length=36), sa.ForeignKey('notices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('filename', sa.String(), nullable=False),
        sa.Column('original_filename', sa.String(), nullable=False),
        sa.Column('file_path', sa.String(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notice_attachments_id', 'notice_attachments', ['id'])
    op.create_index('ix_notice_attachments_notice_id', 'notice_attachments', ['notice_id'])

    op.create_table(
        'notice_replies',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('notice_id', sa.String(length=36), sa.ForeignKey('notices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('reply_type', reply_type, nullable=False),
        sa.Column(
            'parent_reply_id',
            sa.String(length=36),
            sa.ForeignKey('notice_replies.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notice_replies_id', 'notice_replies', ['id'])
    op.create_index('ix_notice_replies_sender_id', 'notice_replies', ['sender_id'])
    op.create_index('ix_notice_replies_notice_id_created_at', 'notice_replies', ['notice_id', 'created_at'])

    op.create_table(
        'notice_reply_recipients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reply_id', sa.String(length=36), sa.ForeignKey('notice_replies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('reply_id', 'user_id', name='uq_reply_recipient'),
    )
    op.create_index('ix_notice_reply_recipients_reply_id', 'notice_reply_recipients', ['reply_id'])
    op.create_index('ix_notice_reply_recipients_user_id', 'notice_reply_recipients', ['user_id'])


def downgrade() -> None:
    op.drop_table('notice_reply_recipients')
    op.drop_table('notice_replies')
    op.drop_table('notice_attachments')
    op.drop_table('notice_recipients')
    op.drop_table('notices')
    op.drop_table('faculty_sections')
    op.drop_table('faculty_classes')
    op.drop_table('users')
    op.drop_table('sections')
    op.drop_table('classes')

    bind = op.get_bind()
    reply_type.drop(bind, checkfirst=True)
    notice_type.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)
