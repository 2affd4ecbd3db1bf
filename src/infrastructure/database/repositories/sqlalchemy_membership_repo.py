"""SQLAlchemy implementation of Membership repository."""

from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreConflictError
from domain.entities.membership import (
    ChatTarget,
    Membership,
    MembershipRole,
    MembershipTarget,
    QueueTarget,
)
from infrastructure.database.errors import is_unique_violation
from infrastructure.database.models import MembershipModel


class SQLAlchemyMembershipRepository:
    """SQLAlchemy implementation of IMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, queue_id: UUID, user_id: UUID) -> Membership | None:
        """Get a user's membership originating from a queue."""
        stmt = select(MembershipModel).where(
            MembershipModel.queue_id == queue_id,
            MembershipModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_chat(self, chat_id: UUID, user_id: UUID) -> Membership | None:
        """Get a user's membership in a chat."""
        stmt = select(MembershipModel).where(
            MembershipModel.chat_id == chat_id,
            MembershipModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_queue(self, queue_id: UUID) -> list[Membership]:
        """Get pending memberships of a queue."""
        stmt = (
            select(MembershipModel)
            .where(
                MembershipModel.queue_id == queue_id,
                MembershipModel.chat_id.is_(None),
            )
            .order_by(MembershipModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_chat(self, chat_id: UUID) -> list[Membership]:
        """Get all memberships of a chat, oldest first."""
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.chat_id == chat_id)
            .order_by(MembershipModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def add(self, membership: Membership) -> Membership:
        """Insert a membership; a duplicate (user, queue) pair is a conflict."""
        model = self._to_model(membership)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise StoreConflictError("membership", str(membership.queue_id)) from exc
        return self._to_entity(model)

    async def remove(self, queue_id: UUID, user_id: UUID) -> bool:
        """Delete a pending membership."""
        stmt = (
            delete(MembershipModel)
            .where(
                MembershipModel.queue_id == queue_id,
                MembershipModel.user_id == user_id,
                MembershipModel.chat_id.is_(None),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def remove_all_for_queue(self, queue_id: UUID) -> int:
        """Delete every pending membership of a queue."""
        stmt = (
            delete(MembershipModel)
            .where(
                MembershipModel.queue_id == queue_id,
                MembershipModel.chat_id.is_(None),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def repoint_to_chat(self, queue_id: UUID, chat_id: UUID) -> int:
        """Realize every pending membership of a queue into a chat."""
        pending = await self.list_for_queue(queue_id)
        for membership in pending:
            await self._save_target(membership.repoint(chat_id))
        return len(pending)

    async def _save_target(self, membership: Membership) -> None:
        stmt = (
            update(MembershipModel)
            .where(MembershipModel.id == membership.id)
            .values(chat_id=membership.chat_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    def _to_entity(self, model: MembershipModel) -> Membership:
        """Convert ORM model to domain entity."""
        target: MembershipTarget
        if model.chat_id is None:
            target = QueueTarget(model.queue_id)
        else:
            target = ChatTarget(model.chat_id)
        return Membership(
            id=model.id,
            queue_id=model.queue_id,
            user_id=model.user_id,
            target=target,
            role=MembershipRole(model.role),
            joined_at=model.joined_at,
        )

    def _to_model(self, entity: Membership) -> MembershipModel:
        """Convert domain entity to ORM model."""
        return MembershipModel(
            id=entity.id,
            queue_id=entity.queue_id,
            chat_id=entity.chat_id,
            user_id=entity.user_id,
            role=entity.role.value,
            joined_at=entity.joined_at,
        )
