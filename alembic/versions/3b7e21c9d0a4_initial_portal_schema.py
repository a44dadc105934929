"""initial_portal_schema

Revision ID: 3b7e21c9d0a4
Revises:
Create Date: 2026-10-19 09:12:44.118205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7e21c9d0a4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the portal schema.

    Creates:
    - users (managed accounts, role kept as raw string)
    - portal_sessions (login sessions + view router state)
    - exercises, exercise_tasks (variant fields in JSON content)
    - task_answers (one row per user and task)
    - activity_log
    """
    # 1. Managed accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('referral_code', sa.String(length=32), nullable=False),
        sa.Column('referred_by', sa.String(length=32), nullable=True),
        sa.Column('discount_amount', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('edited_by', sa.String(length=255), nullable=True),
        sa.Column('edited_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'])

    # 2. Portal sessions
    op.create_table(
        'portal_sessions',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('current_page', sa.String(length=16), nullable=False),
        sa.Column('exercise_mode', sa.String(length=4), nullable=False),
        sa.Column('editing_exercise_id', sa.Integer(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_portal_sessions_user_id', 'portal_sessions', ['user_id'])

    # 3. Exercises and their tasks
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('exercise_type', sa.String(length=9), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('allowed_time', sa.Integer(), nullable=False),
        sa.Column('passage', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('recording_url', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_exercises_exercise_type', 'exercises', ['exercise_type'])

    op.create_table(
        'exercise_tasks',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('task_type', sa.String(length=14), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('allowed_time', sa.Integer(), nullable=False),
        sa.Column('content', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['exercise_id'], ['exercises.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_exercise_tasks_exercise_id', 'exercise_tasks', ['exercise_id'])

    # 4. Saved answers
    op.create_table(
        'task_answers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.String(length=32), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['exercise_id'], ['exercises.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['task_id'], ['exercise_tasks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'task_id', name='uq_answer_user_task')
    )
    op.create_index('ix_task_answers_user_id', 'task_answers', ['user_id'])
    op.create_index('ix_task_answers_exercise_id', 'task_answers', ['exercise_id'])

    # 5. Activity log
    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    """Drop the portal schema (all data is lost)."""
    op.drop_table('activity_log')
    op.drop_index('ix_task_answers_exercise_id', table_name='task_answers')
    op.drop_index('ix_task_answers_user_id', table_name='task_answers')
    op.drop_table('task_answers')
    op.drop_index('ix_exercise_tasks_exercise_id', table_name='exercise_tasks')
    op.drop_table('exercise_tasks')
    op.drop_index('ix_exercises_exercise_type', table_name='exercises')
    op.drop_table('exercises')
    op.drop_index('ix_portal_sessions_user_id', table_name='portal_sessions')
    op.drop_table('portal_sessions')
    op.drop_index('ix_users_referral_code', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
