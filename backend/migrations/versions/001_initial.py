"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-15

Creates all database tables for the Student Enrollment Registry:
- students: Enrollment records with lifecycle and ledger fields
- audit_logs: Append-only log of administrative actions

Also creates indexes for common query patterns.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone_number', sa.String(12), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount_paid', sa.Float(), nullable=False, server_default='0'),
        sa.Column('due_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('incentives_paid', sa.Float(), nullable=False, server_default='0'),
        sa.Column('date_of_joining', sa.Date(), nullable=False),
        sa.Column('country', sa.Text(), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('government_id_proof', sa.Text(), nullable=False),
        sa.Column('activity_status', sa.String(10), nullable=False,
                  server_default='ACTIVE'),
        sa.Column('inactivity_reason', sa.Text(), nullable=True),
        sa.Column('inactive_on', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('phone_number', name='uq_students_phone_number'),
        sa.CheckConstraint(
            "activity_status <> 'INACTIVE' OR "
            "(inactivity_reason IS NOT NULL AND inactivity_reason <> '')",
            name='ck_students_inactive_has_reason'
        ),
    )
    op.create_index('ix_students_activity_status', 'students', ['activity_status'])
    op.create_index('ix_students_inactive_on', 'students', ['inactive_on'])

    # ── Audit Logs Table ──────────────────────────────────────
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('entry_id', sa.String(36), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('admin_name', sa.Text(), nullable=False),
        sa.Column('admin_email', sa.Text(), nullable=False),
        sa.Column('action', sa.String(10), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('student_name', sa.Text(), nullable=False),
        sa.Column('details', sa.Text(), nullable=False, server_default=''),
        sa.UniqueConstraint('entry_id', name='uq_audit_logs_entry_id'),
    )
    op.create_index('ix_audit_logs_student_id', 'audit_logs', ['student_id'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_student_id', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_students_inactive_on', table_name='students')
    op.drop_index('ix_students_activity_status', table_name='students')
    op.drop_table('students')
