"""create memory system tables

Revision ID: 7f3a9c2e4b10
Revises:
Create Date: 2026-09-28 10:12:44.201533

users.memory_mode, memories (unique per user + content hash),
focus_sessions, and the pgvector-backed memory_vectors index table.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel.sql.sqltypes
from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '7f3a9c2e4b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

memory_mode = sa.Enum('PERSISTENT', 'HUMANIZED', name='memorymode')
memory_type = sa.Enum('WORKING', 'CONSOLIDATED', 'WISDOM', name='memorytype')
privacy_level = sa.Enum('PUBLIC', 'CONTEXTUAL', 'PRIVATE', 'VAULT', name='privacylevel')


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table('users',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('memory_mode', memory_mode, nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('memories',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('chat_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('content', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('memory_type', memory_type, nullable=False),
        sa.Column('privacy_level', privacy_level, nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('importance', sa.Integer(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('content_hash', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('vector_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('strength', sa.Integer(), nullable=False),
        sa.Column('decay_rate', sa.Integer(), nullable=False),
        sa.Column('is_permanent', sa.Boolean(), nullable=False),
        sa.Column('requires_auth', sa.Boolean(), nullable=False),
        sa.Column('access_count', sa.Integer(), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(), nullable=True),
        sa.Column('meta', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'content_hash', name='uq_memories_user_content_hash'),
        sa.UniqueConstraint('vector_id')
    )
    op.create_index(op.f('ix_memories_user_id'), 'memories', ['user_id'], unique=False)
    op.create_index(op.f('ix_memories_content_hash'), 'memories', ['content_hash'], unique=False)
    op.create_index(op.f('ix_memories_memory_type'), 'memories', ['memory_type'], unique=False)
    op.create_index(op.f('ix_memories_privacy_level'), 'memories', ['privacy_level'], unique=False)
    op.create_index(op.f('ix_memories_category'), 'memories', ['category'], unique=False)

    op.create_table('focus_sessions',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('categories', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('boost_factor', sa.Integer(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_focus_sessions_user_id'), 'focus_sessions', ['user_id'], unique=False)
    op.create_index(op.f('ix_focus_sessions_expires_at'), 'focus_sessions', ['expires_at'], unique=False)
    op.create_index(op.f('ix_focus_sessions_is_active'), 'focus_sessions', ['is_active'], unique=False)

    op.create_table('memory_vectors',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('embedding', Vector(1536), nullable=False),
        sa.Column('meta', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Every query filters on the owner first
    op.execute("CREATE INDEX ix_memory_vectors_user_id ON memory_vectors ((meta->>'user_id'))")
    op.create_index(
        'ix_memory_vectors_embedding',
        'memory_vectors',
        ['embedding'],
        postgresql_using='ivfflat',
        postgresql_with={'lists': 100},
        postgresql_ops={'embedding': 'vector_cosine_ops'}
    )


def downgrade() -> None:
    op.drop_index('ix_memory_vectors_embedding', table_name='memory_vectors')
    op.execute("DROP INDEX IF EXISTS ix_memory_vectors_user_id")
    op.drop_table('memory_vectors')

    op.drop_index(op.f('ix_focus_sessions_is_active'), table_name='focus_sessions')
    op.drop_index(op.f('ix_focus_sessions_expires_at'), table_name='focus_sessions')
    op.drop_index(op.f('ix_focus_sessions_user_id'), table_name='focus_sessions')
    op.drop_table('focus_sessions')

    op.drop_index(op.f('ix_memories_category'), table_name='memories')
    op.drop_index(op.f('ix_memories_privacy_level'), table_name='memories')
    op.drop_index(op.f('ix_memories_memory_type'), table_name='memories')
    op.drop_index(op.f('ix_memories_content_hash'), table_name='memories')
    op.drop_index(op.f('ix_memories_user_id'), table_name='memories')
    op.drop_table('memories')

    op.drop_table('users')

    privacy_level.drop(op.get_bind(), checkfirst=True)
    memory_type.drop(op.get_bind(), checkfirst=True)
    memory_mode.drop(op.get_bind(), checkfirst=True)
