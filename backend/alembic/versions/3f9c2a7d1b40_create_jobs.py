"""create jobs

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-10-17 09:12:44.518302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create jobs table with external_id and apply_url dedup constraints."""
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('company', sa.Text(), nullable=False),
        sa.Column('company_logo', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('salary_text', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('job_type', sa.String(length=20), server_default='full-time', nullable=False),
        # job_type: full-time, part-time, contract, freelance, internship
        sa.Column('experience_level', sa.String(length=20), server_default='mid', nullable=False),
        # experience_level: entry, mid, senior, lead
        sa.Column('skills', postgresql.JSONB(astext_type=sa.Text()), server_default='[]', nullable=False),
        sa.Column('apply_url', sa.Text(), nullable=True),
        sa.Column('posted_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id', name='uq_jobs_external_id'),
        sa.UniqueConstraint('apply_url', name='uq_jobs_apply_url'),
    )

    # Cleanup scans oldest-first; triggers filter by source
    op.create_index('ix_jobs_posted_at', 'jobs', ['posted_at'])
    op.create_index('ix_jobs_source', 'jobs', ['source'])


def downgrade() -> None:
    """Drop jobs table."""
    op.drop_index('ix_jobs_source', table_name='jobs')
    op.drop_index('ix_jobs_posted_at', table_name='jobs')
    op.drop_table('jobs')
