"""create_chat_queue_tables

Revision ID: 4c2e9a71d5b3
Revises:
Create Date: 2026-10-18 09:12:05.418233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c2e9a71d5b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, queues, chats, memberships and messages."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('chat_queues',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('intention', sa.String(length=200), nullable=True),
        sa.Column('min_participants', sa.Integer(), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False),
        sa.Column('current_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='waiting'),
        sa.Column('creator_id', sa.UUID(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('min_participants >= 2', name='ck_chat_queues_min'),
        sa.CheckConstraint('max_participants >= min_participants', name='ck_chat_queues_max'),
        sa.CheckConstraint(
            'current_count >= 0 AND current_count <= max_participants',
            name='ck_chat_queues_count',
        ),
        sa.CheckConstraint(
            "status IN ('waiting', 'active', 'cancelled')", name='ck_chat_queues_status'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chat_queues_creator_id', 'chat_queues', ['creator_id'], unique=False)
    op.create_index(
        'ix_chat_queues_status_created_at', 'chat_queues', ['status', 'created_at'], unique=False
    )

    op.create_table('group_chats',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('queue_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('intention', sa.String(length=200), nullable=True),
        sa.Column('member_count', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('active', 'archived')", name='ck_group_chats_status'),
        sa.ForeignKeyConstraint(['queue_id'], ['chat_queues.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('queue_id'),
    )

    op.create_table('chat_memberships',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('queue_id', sa.UUID(), nullable=False),
        sa.Column('chat_id', sa.UUID(), nullable=True),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='member'),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('creator', 'member')", name='ck_chat_memberships_role'),
        sa.ForeignKeyConstraint(['queue_id'], ['chat_queues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['chat_id'], ['group_chats.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'queue_id', name='uq_chat_memberships_user_queue'),
    )
    op.create_index(
        'ix_chat_memberships_queue_id', 'chat_memberships', ['queue_id'], unique=False
    )
    op.create_index('ix_chat_memberships_user_id', 'chat_memberships', ['user_id'], unique=False)
    op.create_index(
        'ix_chat_memberships_chat_id_user_id',
        'chat_memberships',
        ['chat_id', 'user_id'],
        unique=False,
    )

    op.create_table('chat_messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('chat_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='message'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "type IN ('message', 'prayer_request', 'system')", name='ck_chat_messages_type'
        ),
        sa.ForeignKeyConstraint(['chat_id'], ['group_chats.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_chat_messages_chat_id_created_at_id',
        'chat_messages',
        ['chat_id', 'created_at', 'id'],
        unique=False,
    )


def downgrade() -> None:
    """Drop chat queue tables."""
    op.drop_index('ix_chat_messages_chat_id_created_at_id', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index('ix_chat_memberships_chat_id_user_id', table_name='chat_memberships')
    op.drop_index('ix_chat_memberships_user_id', table_name='chat_memberships')
    op.drop_index('ix_chat_memberships_queue_id', table_name='chat_memberships')
    op.drop_table('chat_memberships')
    op.drop_table('group_chats')
    op.drop_index('ix_chat_queues_status_created_at', table_name='chat_queues')
    op.drop_index('ix_chat_queues_creator_id', table_name='chat_queues')
    op.drop_table('chat_queues')
    op.drop_table('profiles')
