"""create users, interactions and user_stats

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = 'a7c1e2d3f4b5'
down_revision = None
branch_labels = None
depends_on = None

AGE_RANGES = ('Under 18', '18-24', '25-34', '35-44', '45+')
ETHNICITIES = ('White', 'Black', 'Hispanic/Latino', 'Asian', 'Middle Eastern', 'Mixed', 'Other')
QUALITIES = ('Good', 'Neutral', 'Bad')


def _in_list(column: str, values: tuple) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=True, server_default='UTC'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'interactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.Time(), nullable=False),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('age_range', sa.String(length=32), nullable=True),
        sa.Column('ethnicity', sa.String(length=32), nullable=True),
        sa.Column('attractiveness_rating', sa.Integer(), nullable=False),
        sa.Column('interaction_quality', sa.String(length=32), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint(
            'attractiveness_rating >= 1 AND attractiveness_rating <= 10',
            name='ck_interactions_rating_range'
        ),
        sa.CheckConstraint(_in_list('age_range', AGE_RANGES), name='age_range'),
        sa.CheckConstraint(_in_list('ethnicity', ETHNICITIES), name='ethnicity'),
        sa.CheckConstraint(_in_list('interaction_quality', QUALITIES), name='interaction_quality'),
    )
    op.create_index('ix_interactions_id', 'interactions', ['id'])
    op.create_index('ix_interactions_user_id', 'interactions', ['user_id'])
    op.create_index('ix_interactions_user_date', 'interactions', ['user_id', 'date'])
    op.create_index('ix_interactions_created_at', 'interactions', ['created_at'])

    op.create_table(
        'user_stats',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_interactions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_interaction_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_user_stats_id', 'user_stats', ['id'])
    op.create_index('ix_user_stats_user_id', 'user_stats', ['user_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_user_stats_user_id', table_name='user_stats')
    op.drop_index('ix_user_stats_id', table_name='user_stats')
    op.drop_table('user_stats')

    op.drop_index('ix_interactions_created_at', table_name='interactions')
    op.drop_index('ix_interactions_user_date', table_name='interactions')
    op.drop_index('ix_interactions_user_id', table_name='interactions')
    op.drop_index('ix_interactions_id', table_name='interactions')
    op.drop_table('interactions')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
