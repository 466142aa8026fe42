"""Initial schema: profiles, schools, needs, notifications, audit logs, custom pages

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy stores enum member names
user_role = sa.Enum('ADMIN', 'PRINCIPAL', name='userrole')
governorate = sa.Enum(
    'DAMASCUS', 'RIF_DIMASHQ', 'ALEPPO', 'HOMS', 'HAMA', 'LATAKIA', 'TARTUS',
    'DEIR_EZ_ZOR', 'RAQQA', 'HASAKAH', 'DARAA', 'SUWAYDA', 'QUNEITRA', 'IDLIB',
    name='governorate',
)
education_level = sa.Enum('PRIMARY', 'MIDDLE', 'HIGH_SCHOOL', 'MIXED', name='educationlevel')
school_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='schoolstatus')
need_category = sa.Enum(
    'FURNITURE', 'EQUIPMENT', 'OUTDOOR', 'SUPPLIES', 'MAINTENANCE', 'TECHNOLOGY', 'OTHER',
    name='needcategory',
)
need_priority = sa.Enum('LOW', 'MEDIUM', 'HIGH', name='needpriority')
need_status = sa.Enum('PENDING', 'IN_PROGRESS', 'FULFILLED', name='needstatus')


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('language', sa.String(5), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)

    op.create_table(
        'schools',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('principal_id', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('governorate', governorate, nullable=True),
        sa.Column('education_level', education_level, nullable=True),
        sa.Column('number_of_students', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('contact_phone', sa.String(30), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('status', school_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_schools_principal_id', 'schools', ['principal_id'])
    op.create_index('ix_schools_governorate', 'schools', ['governorate'])
    op.create_index('ix_schools_status', 'schools', ['status'])

    op.create_table(
        'needs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', need_category, nullable=False),
        sa.Column('priority', need_priority, nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('status', need_status, nullable=False),
        sa.Column('submitted_by', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('fulfilled_by', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('fulfilled_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_needs_school_id', 'needs', ['school_id'])
    op.create_index('ix_needs_status', 'needs', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('recipient_id', sa.Uuid(), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=True),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])

    op.create_table(
        'custom_pages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('subject', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_custom_pages_slug', 'custom_pages', ['slug'], unique=True)


def downgrade() -> None:
    op.drop_table('custom_pages')
    op.drop_table('audit_logs')
    op.drop_table('notifications')
    op.drop_table('needs')
    op.drop_table('schools')
    op.drop_table('profiles')

    bind = op.get_bind()
    for enum_type in (need_status, need_priority, need_category, school_status,
                      education_level, governorate, user_role):
        enum_type.drop(bind, checkfirst=True)
