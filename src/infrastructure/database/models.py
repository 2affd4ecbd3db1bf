"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model (mirrored from the identity provider)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    display_name: Mapped[str | None] = mapped_column(String(100))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class QueueModel(Base):
    """Matchmaking queue model.

    ``version`` is bumped on every write and guards compare-and-swap updates.
    """

    __tablename__ = "chat_queues"
    __table_args__ = (
        CheckConstraint("min_participants >= 2", name="ck_chat_queues_min"),
        CheckConstraint(
            "max_participants >= min_participants", name="ck_chat_queues_max"
        ),
        CheckConstraint(
            "current_count >= 0 AND current_count <= max_participants",
            name="ck_chat_queues_count",
        ),
        Index("ix_chat_queues_status_created_at", "status", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    intention: Mapped[str | None] = mapped_column(String(200))
    min_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('waiting', 'active', 'cancelled')",
            name="ck_chat_queues_status",
        ),
        nullable=False,
        default="waiting",
    )
    creator_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    memberships: Mapped[list["MembershipModel"]] = relationship(
        "MembershipModel",
        back_populates="queue",
        cascade="all, delete-orphan",
    )


class GroupChatModel(Base):
    """Group chat realized from a queue (at most one per queue)."""

    __tablename__ = "group_chats"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    queue_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("chat_queues.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    intention: Mapped[str | None] = mapped_column(String(200))
    member_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('active', 'archived')",
            name="ck_group_chats_status",
        ),
        nullable=False,
        default="active",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    memberships: Mapped[list["MembershipModel"]] = relationship(
        "MembershipModel",
        back_populates="chat",
    )
    messages: Mapped[list["ChatMessageModel"]] = relationship(
        "ChatMessageModel",
        back_populates="chat",
        cascade="all, delete-orphan",
    )


class MembershipModel(Base):
    """Membership ledger row.

    ``chat_id`` is NULL while the membership is pending on its queue;
    ``queue_id`` stays as the historical origin after realization.
    """

    __tablename__ = "chat_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "queue_id", name="uq_chat_memberships_user_queue"),
        Index("ix_chat_memberships_chat_id_user_id", "chat_id", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    queue_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("chat_queues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chat_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("group_chats.id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "role IN ('creator', 'member')",
            name="ck_chat_memberships_role",
        ),
        nullable=False,
        default="member",
    )
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    queue: Mapped["QueueModel"] = relationship(
        "QueueModel",
        back_populates="memberships",
    )
    chat: Mapped[Optional["GroupChatModel"]] = relationship(
        "GroupChatModel",
        back_populates="memberships",
    )


class ChatMessageModel(Base):
    """Append-only chat message; the integer key is the insertion sequence."""

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_chat_id_created_at_id", "chat_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    chat_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("group_chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "type IN ('message', 'prayer_request', 'system')",
            name="ck_chat_messages_type",
        ),
        nullable=False,
        default="message",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    chat: Mapped["GroupChatModel"] = relationship(
        "GroupChatModel",
        back_populates="messages",
    )
