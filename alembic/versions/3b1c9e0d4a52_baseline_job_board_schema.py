"""baseline_job_board_schema

Revision ID: 3b1c9e0d4a52
Revises:
Create Date: 2026-10-19 10:12:41.508113

Production-safe migration: only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3b1c9e0d4a52'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('image', sa.String(), nullable=False),
            sa.Column('resume', sa.String(), nullable=False, server_default=''),
            sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('otp', sa.String(length=6), nullable=True),
            sa.Column('otp_expires', sa.DateTime(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('companies'):
        op.create_table('companies',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('image', sa.String(), nullable=False),
            sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('otp', sa.String(length=6), nullable=True),
            sa.Column('otp_expires', sa.DateTime(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
        op.create_index(op.f('ix_companies_email'), 'companies', ['email'], unique=True)

    if not table_exists('admins'):
        op.create_table('admins',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('image', sa.String(), nullable=False, server_default=''),
            sa.Column('role', sa.String(), nullable=False, server_default='admin'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_admins_id'), 'admins', ['id'], unique=False)
        op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)

    if not table_exists('categories'):
        op.create_table('categories',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_visible', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.CheckConstraint('usage_count >= 0', name='ck_categories_usage_count_non_negative'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_categories_id'), 'categories', ['id'], unique=False)
        op.create_index(op.f('ix_categories_type'), 'categories', ['type'], unique=True)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('location_city', sa.String(), nullable=False),
            sa.Column('location_state', sa.String(), nullable=False),
            sa.Column('location_country', sa.String(), nullable=False),
            sa.Column('location_pincode', sa.String(length=6), nullable=True),
            sa.Column('salary_min', sa.Integer(), nullable=True),
            sa.Column('salary_max', sa.Integer(), nullable=True),
            sa.Column('job_type', sa.String(), nullable=False),
            sa.Column('experience_level', sa.String(), nullable=False),
            sa.Column('employment_type', sa.String(), nullable=False),
            sa.Column('remote_option', sa.String(), nullable=False),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('category_id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('visible', sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
            sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)
        op.create_index(op.f('ix_jobs_category_id'), 'jobs', ['category_id'], unique=False)
        op.create_index(op.f('ix_jobs_company_id'), 'jobs', ['company_id'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index('idx_jobs_company_visible', 'jobs', ['company_id', 'visible'], unique=False)

    if not table_exists('job_applications'):
        op.create_table('job_applications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('job_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('company_id', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(), nullable=False, server_default='pending'),
            sa.Column('applied_date', sa.DateTime(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'job_id', name='uq_job_applications_user_job')
        )
        op.create_index(op.f('ix_job_applications_id'), 'job_applications', ['id'], unique=False)
        op.create_index(op.f('ix_job_applications_job_id'), 'job_applications', ['job_id'], unique=False)
        op.create_index(op.f('ix_job_applications_user_id'), 'job_applications', ['user_id'], unique=False)
        op.create_index(op.f('ix_job_applications_company_id'), 'job_applications', ['company_id'], unique=False)
        op.create_index(op.f('ix_job_applications_created_at'), 'job_applications', ['created_at'], unique=False)
        op.create_index('idx_job_applications_company_status', 'job_applications', ['company_id', 'status'], unique=False)

    if not table_exists('revoked_tokens'):
        op.create_table('revoked_tokens',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('jti', sa.String(length=64), nullable=False),
            sa.Column('principal_kind', sa.String(), nullable=False),
            sa.Column('principal_id', sa.Integer(), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_revoked_tokens_jti'), 'revoked_tokens', ['jti'], unique=True)


def downgrade() -> None:
    for table_name in ('revoked_tokens', 'job_applications', 'jobs', 'categories', 'admins', 'companies', 'users'):
        if table_exists(table_name):
            op.drop_table(table_name)
