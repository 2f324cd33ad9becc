"""initial schema

Revision ID: initial_schema
Revises: 
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('username', sa.String(length=10), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    # Create tags table
    op.create_table('tags',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tags_title'), 'tags', ['title'], unique=True)

    # Create contents table
    op.create_table('contents',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('link', sa.String(), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("type IN ('twitter', 'youtube')", name='ck_contents_type'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_contents_user_id'), 'contents', ['user_id'], unique=False)
    op.create_index(op.f('ix_contents_created_at'), 'contents', ['created_at'], unique=False)

    # Create content_tags table
    op.create_table('content_tags',
        sa.Column('content_id', sa.String(length=32), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.String(length=32), nullable=False),
        sa.ForeignKeyConstraint(['content_id'], ['contents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ),
        sa.PrimaryKeyConstraint('content_id', 'position')
    )
    op.create_index(op.f('ix_content_tags_tag_id'), 'content_tags', ['tag_id'], unique=False)

    # Create share_links table
    op.create_table('share_links',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('hash', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index(op.f('ix_share_links_hash'), 'share_links', ['hash'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_share_links_hash'), table_name='share_links')
    op.drop_table('share_links')
    op.drop_index(op.f('ix_content_tags_tag_id'), table_name='content_tags')
    op.drop_table('content_tags')
    op.drop_index(op.f('ix_contents_created_at'), table_name='contents')
    op.drop_index(op.f('ix_contents_user_id'), table_name='contents')
    op.drop_table('contents')
    op.drop_index(op.f('ix_tags_title'), table_name='tags')
    op.drop_table('tags')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
