"""initial schema: issues, status_updates, math_problems

Creates the issue tracking tables and the saved solver results table.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

issue_category = sa.Enum('Pothole', 'Water Leak', 'Streetlight', 'Illegal Dumping', 'Power Outage', name='issue_category')
issue_status = sa.Enum('Logged', 'In Progress', 'Resolved', name='issue_status')
difficulty = sa.Enum('Easy', 'Medium', 'Hard', name='difficulty')
subject = sa.Enum('Algebra', 'Geometry', 'Calculus', 'Trigonometry', 'Statistics', name='subject')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'issues',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('tracking_id', sa.String(length=8), nullable=False),
        sa.Column('category', issue_category, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', issue_status, nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('photo', sa.LargeBinary(), nullable=True),
        sa.Column('photo_content_type', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_issues_tracking_id', 'issues', ['tracking_id'], unique=True)
    op.create_index('ix_issues_category', 'issues', ['category'])
    op.create_index('ix_issues_status', 'issues', ['status'])
    op.create_index('ix_issues_created_at', 'issues', ['created_at'])
    op.create_index('ix_issues_lat_lng', 'issues', ['latitude', 'longitude'])

    op.create_table(
        'status_updates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('issue_id', sa.String(length=36), sa.ForeignKey('issues.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', issue_status, nullable=False),
        sa.Column('message', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_status_updates_issue_id', 'status_updates', ['issue_id'])
    op.create_index('ix_status_updates_created_at', 'status_updates', ['created_at'])

    op.create_table(
        'math_problems',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('problem_text', sa.Text(), nullable=False),
        sa.Column('solution', sa.Text(), nullable=False),
        sa.Column('image', sa.LargeBinary(), nullable=True),
        sa.Column('image_content_type', sa.String(length=100), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('difficulty', difficulty, nullable=False),
        sa.Column('subject', subject, nullable=False),
    )
    op.create_index('ix_math_problems_timestamp', 'math_problems', ['timestamp'])
    op.create_index('ix_math_problems_subject', 'math_problems', ['subject'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('math_problems')
    op.drop_table('status_updates')
    op.drop_table('issues')
    subject.drop(op.get_bind(), checkfirst=True)
    difficulty.drop(op.get_bind(), checkfirst=True)
    issue_status.drop(op.get_bind(), checkfirst=True)
    issue_category.drop(op.get_bind(), checkfirst=True)
