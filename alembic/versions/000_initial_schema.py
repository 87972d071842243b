"""Initial schema creation with all tables

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-16 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '000_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('ADMIN', 'SUPERVISOR', 'EMPLOYEE', name='user_role')
goal_status = sa.Enum('NOT_STARTED', 'IN_PROGRESS', 'COMPLETED', 'ON_HOLD', 'CANCELLED', name='goal_status')
attendance_status = sa.Enum('PRESENT', 'ABSENT', 'LATE', 'ON_LEAVE', name='attendance_status')
message_event = sa.Enum(
    'DEADLINE_APPROACHING', 'REVIEW_DUE', 'FEEDBACK_REQUEST', 'EVALUATION_COMPLETED', 'NEW_ASSIGNMENT',
    name='message_event'
)
audit_action = sa.Enum(
    'AUTH_LOGIN_SUCCESS', 'AUTH_LOGIN_FAILURE',
    'AUTH_PASSWORD_CHANGE_SUCCESS', 'AUTH_PASSWORD_CHANGE_FAILURE',
    'SYSTEM_SETTINGS_UPDATE', 'DATA_BACKUP_SUCCESS', 'DATA_BACKUP_FAILURE',
    'BATCH_ASSIGNMENT_SUCCESS', 'BATCH_ASSIGNMENT_FAILURE',
    'NOTIFICATION_READ', 'SYSTEM_STARTUP',
    name='audit_action'
)


def upgrade() -> None:
    # Create users table (self-referencing supervisor)
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=False),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('supervisor_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['supervisor_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_supervisor_id'), 'users', ['supervisor_id'], unique=False)

    # Create goals table
    op.create_table(
        'goals',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', goal_status, nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('supervisor_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['supervisor_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_goals_employee_id'), 'goals', ['employee_id'], unique=False)
    op.create_index(op.f('ix_goals_supervisor_id'), 'goals', ['supervisor_id'], unique=False)

    # Create evaluation_criteria table
    op.create_table(
        'evaluation_criteria',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create performance_scores table
    op.create_table(
        'performance_scores',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('criteria_id', sa.String(length=36), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('evaluation_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('evaluator_id', sa.String(length=36), nullable=True),
        sa.CheckConstraint('score >= 1 AND score <= 5', name='ck_performance_scores_score_range'),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['criteria_id'], ['evaluation_criteria.id'], ),
        sa.ForeignKeyConstraint(['evaluator_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_performance_scores_employee_id'), 'performance_scores', ['employee_id'], unique=False)
    op.create_index(op.f('ix_performance_scores_criteria_id'), 'performance_scores', ['criteria_id'], unique=False)
    op.create_index(op.f('ix_performance_scores_evaluator_id'), 'performance_scores', ['evaluator_id'], unique=False)

    # Create work_outputs table
    op.create_table(
        'work_outputs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_url', sa.String(), nullable=True),
        sa.Column('submission_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_work_outputs_employee_id'), 'work_outputs', ['employee_id'], unique=False)

    # Create attendance_records table
    op.create_table(
        'attendance_records',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', attendance_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_attendance_records_employee_id'), 'attendance_records', ['employee_id'], unique=False)

    # Create auto_message_triggers table
    op.create_table(
        'auto_message_triggers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('event_name', message_event, nullable=False),
        sa.Column('message_template', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('days_before_event', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create notifications table
    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('recipient_id', sa.String(length=36), nullable=False),
        sa.Column('actor_id', sa.String(length=36), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notifications_recipient_id'), 'notifications', ['recipient_id'], unique=False)
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'], unique=False)

    # Create system_settings table (single row, id "global_settings")
    op.create_table(
        'system_settings',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('app_name', sa.String(), nullable=False),
        sa.Column('system_theme', sa.String(), nullable=False),
        sa.Column('maintenance_mode', sa.Boolean(), nullable=False),
        sa.Column('notifications_enabled', sa.Boolean(), nullable=False),
        sa.Column('email_notifications', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create audit_logs table; user_id has no foreign key so entries survive user deletion
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('action', audit_action, nullable=False),
        sa.Column('target_type', sa.String(), nullable=True),
        sa.Column('target_id', sa.String(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_user_id'), 'audit_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_audit_logs_action'), 'audit_logs', ['action'], unique=False)
    op.create_index(op.f('ix_audit_logs_timestamp'), 'audit_logs', ['timestamp'], unique=False)


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('system_settings')
    op.drop_table('notifications')
    op.drop_table('auto_message_triggers')
    op.drop_table('attendance_records')
    op.drop_table('work_outputs')
    op.drop_table('performance_scores')
    op.drop_table('evaluation_criteria')
    op.drop_table('goals')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (audit_action, message_event, attendance_status, goal_status, user_role):
        enum_type.drop(bind, checkfirst=True)
