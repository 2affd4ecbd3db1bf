"""SQLAlchemy implementation of Queue repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreConflictError
from domain.entities.queue import Queue, QueueStatus
from infrastructure.database.models import QueueModel


class SQLAlchemyQueueRepository:
    """SQLAlchemy implementation of IQueueRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID, for_update: bool = False) -> Queue | None:
        """Get a queue by ID.

        With ``for_update`` the row is locked until the transaction ends on
        backends that support ``SELECT ... FOR UPDATE`` (SQLite ignores it and
        relies on the version check in ``save``).
        """
        stmt = select(QueueModel).where(QueueModel.id == id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_status(self, status: QueueStatus) -> list[Queue]:
        """Get all queues in a status, newest first."""
        stmt = (
            select(QueueModel)
            .where(QueueModel.status == status.value)
            .order_by(QueueModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, queue: Queue) -> Queue:
        """Create a new queue."""
        model = self._to_model(queue)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def save(self, queue: Queue, expected_version: int) -> Queue:
        """Compare-and-swap the mutable fields of a queue.

        The UPDATE only matches while the stored version is still
        ``expected_version``; a concurrent writer that got there first leaves
        zero matched rows.
        """
        now = datetime.utcnow()
        stmt = (
            update(QueueModel)
            .where(
                QueueModel.id == queue.id,
                QueueModel.version == expected_version,
            )
            .values(
                current_count=queue.current_count,
                status=queue.status.value,
                version=expected_version + 1,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            raise StoreConflictError("queue", str(queue.id))

        queue.version = expected_version + 1
        queue.updated_at = now
        return queue

    async def count_by_status(self, status: QueueStatus) -> int:
        """Count queues in a status."""
        stmt = (
            select(func.count())
            .select_from(QueueModel)
            .where(QueueModel.status == status.value)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: QueueModel) -> Queue:
        """Convert ORM model to domain entity."""
        return Queue(
            id=model.id,
            creator_id=model.creator_id,
            title=model.title,
            description=model.description,
            intention=model.intention,
            min_participants=model.min_participants,
            max_participants=model.max_participants,
            current_count=model.current_count,
            status=QueueStatus(model.status),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Queue) -> QueueModel:
        """Convert domain entity to ORM model."""
        return QueueModel(
            id=entity.id,
            creator_id=entity.creator_id,
            title=entity.title,
            description=entity.description,
            intention=entity.intention,
            min_participants=entity.min_participants,
            max_participants=entity.max_participants,
            current_count=entity.current_count,
            status=entity.status.value,
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
