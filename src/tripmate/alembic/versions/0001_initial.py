"""initial chat schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'thread',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_one_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user_two_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('user_one_id', 'user_two_id', name='uq_thread_pair'),
    )
    op.create_index('ix_thread_user_one_id', 'thread', ['user_one_id'])
    op.create_index('ix_thread_user_two_id', 'thread', ['user_two_id'])

    op.create_table(
        'message',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('thread_id', sa.Integer(), sa.ForeignKey('thread.id'), nullable=False),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('message_type', sa.String(length=16), nullable=False, server_default='text'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_message_thread_id', 'message', ['thread_id'])


def downgrade() -> None:
    op.drop_index('ix_message_thread_id', table_name='message')
    op.drop_table('message')
    op.drop_index('ix_thread_user_two_id', table_name='thread')
    op.drop_index('ix_thread_user_one_id', table_name='thread')
    op.drop_table('thread')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
