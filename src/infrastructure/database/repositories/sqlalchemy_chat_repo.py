"""SQLAlchemy implementation of Chat repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreConflictError
from domain.entities.chat import Chat, ChatStatus, Message, MessageType
from infrastructure.database.errors import is_unique_violation
from infrastructure.database.models import (
    ChatMessageModel,
    GroupChatModel,
    MembershipModel,
)


class SQLAlchemyChatRepository:
    """SQLAlchemy implementation of IChatRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Chat | None:
        """Get a chat by ID."""
        stmt = select(GroupChatModel).where(GroupChatModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_user(self, user_id: UUID) -> list[Chat]:
        """Get all chats a user is a member of, newest first."""
        stmt = (
            select(GroupChatModel)
            .join(MembershipModel, MembershipModel.chat_id == GroupChatModel.id)
            .where(MembershipModel.user_id == user_id)
            .order_by(GroupChatModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, chat: Chat) -> Chat:
        """Create a chat; a second chat for the same queue is a conflict."""
        model = self._to_model(chat)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise StoreConflictError("chat", str(chat.queue_id)) from exc
        await self._session.refresh(model)
        return self._to_entity(model)

    async def add_message(self, message: Message) -> Message:
        """Append a message; the store assigns its sequence id."""
        model = ChatMessageModel(
            chat_id=message.chat_id,
            user_id=message.user_id,
            body=message.body,
            type=message.type.value,
            created_at=message.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._message_to_entity(model)

    async def get_messages(self, chat_id: UUID) -> list[Message]:
        """Get a chat's messages, oldest first with the sequence as tie-break."""
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.chat_id == chat_id)
            .order_by(ChatMessageModel.created_at, ChatMessageModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._message_to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: GroupChatModel) -> Chat:
        """Convert ORM model to domain entity."""
        return Chat(
            id=model.id,
            queue_id=model.queue_id,
            title=model.title,
            description=model.description,
            intention=model.intention,
            member_count=model.member_count,
            status=ChatStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Chat) -> GroupChatModel:
        """Convert domain entity to ORM model."""
        return GroupChatModel(
            id=entity.id,
            queue_id=entity.queue_id,
            title=entity.title,
            description=entity.description,
            intention=entity.intention,
            member_count=entity.member_count,
            status=entity.status.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _message_to_entity(self, model: ChatMessageModel) -> Message:
        """Convert message ORM model to domain entity."""
        return Message(
            id=model.id,
            chat_id=model.chat_id,
            user_id=model.user_id,
            body=model.body,
            type=MessageType(model.type),
            created_at=model.created_at,
        )
