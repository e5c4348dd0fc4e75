"""create users and scores tables

Revision ID: 3a7c9e1f2b4d
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c9e1f2b4d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # The app also runs create_all() on startup; only create what is missing.
    existing_tables = set(insp.get_table_names())

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=128), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)

    if 'scores' not in existing_tables:
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('game_id', sa.String(length=128), nullable=False),
            sa.Column('score', sa.BigInteger(), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'game_id', name='uq_scores_user_game'),
        )
        op.create_index('ix_scores_user_id', 'scores', ['user_id'], unique=False)


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'scores' in existing_tables:
        op.drop_index('ix_scores_user_id', table_name='scores')
        op.drop_table('scores')
    if 'users' in existing_tables:
        op.drop_index('ix_users_username', table_name='users')
        op.drop_table('users')
