"""Matchmaker service: the queue-to-chat state machine."""

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

import structlog

from core.exceptions import (
    AuthorizationError,
    InvalidQueueConfigError,
    QueueClosedError,
    QueueFullError,
    QueueNotFoundError,
)
from domain.entities.chat import Chat, Message, MessageType
from domain.entities.membership import Membership, MembershipRole
from domain.entities.notification import Notification, NotificationEvents
from domain.entities.queue import Queue, QueueStatus, valid_bounds
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notifier import INotifier, NotificationDispatcher
from domain.services.retry import run_with_retries

logger = structlog.get_logger()

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKOFF_SECONDS = 0.02


@dataclass
class JoinResult:
    """Outcome of a join request.

    ``joined`` is False for a repeated join by an existing member. ``chat`` is
    set whenever the caller's membership already points at a chat, and
    ``realized`` only for the one call that crossed the threshold.
    """

    queue: Queue
    joined: bool
    chat: Chat | None = None
    realized: bool = False
    member_ids: list[UUID] = field(default_factory=list)


class MatchmakerService:
    """Accepts join/leave/cancel intents and converts satisfied queues into chats.

    Every mutation runs in its own unit of work. The queue row is read with a
    row lock and written back with a version check, so two writers on the same
    queue are serialized; the loser gets ``StoreConflictError`` and the whole
    attempt is replayed against fresh state.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: INotifier | None = None,
        dispatcher: NotificationDispatcher | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    ) -> None:
        self._uow_factory = uow_factory
        self.notifications = dispatcher or NotificationDispatcher(notifier)
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds

    # --- Reads ---

    async def get_queue(self, queue_id: UUID) -> Queue:
        async with self._uow_factory() as uow:
            queue = await uow.queues.get(queue_id)
            if not queue:
                raise QueueNotFoundError(str(queue_id))
            return queue

    async def list_waiting_queues(self) -> list[Queue]:
        async with self._uow_factory() as uow:
            return await uow.queues.list_by_status(QueueStatus.WAITING)

    # --- Mutations ---

    async def create_queue(
        self,
        creator_id: UUID,
        title: str,
        min_participants: int,
        max_participants: int,
        description: str | None = None,
        intention: str | None = None,
    ) -> Queue:
        """Propose a queue with the creator enrolled as its first member."""
        if not valid_bounds(min_participants, max_participants):
            raise InvalidQueueConfigError(min_participants, max_participants)

        async with self._uow_factory() as uow:
            queue = Queue(
                creator_id=creator_id,
                title=title,
                description=description,
                intention=intention,
                min_participants=min_participants,
                max_participants=max_participants,
            )
            created = await uow.queues.create(queue)
            await uow.memberships.add(
                Membership.for_queue(created.id, creator_id, MembershipRole.CREATOR)
            )
            await uow.commit()

        logger.info(
            "queue_created",
            queue_id=str(created.id),
            creator_id=str(creator_id),
            min_participants=min_participants,
            max_participants=max_participants,
        )
        return created

    async def join(self, queue_id: UUID, user_id: UUID) -> JoinResult:
        """Add a user to a waiting queue, realizing it when the minimum is met.

        A repeated join by an existing member is a no-op.

        Raises:
            QueueNotFoundError: No such queue.
            QueueFullError: The queue is at ``max_participants``.
            QueueClosedError: The queue is cancelled or already realized.
        """
        result = await run_with_retries(
            "join",
            lambda: self._join_once(queue_id, user_id),
            self._max_attempts,
            self._backoff_seconds,
        )

        if result.realized and result.chat:
            logger.info(
                "queue_realized",
                queue_id=str(queue_id),
                chat_id=str(result.chat.id),
                member_count=result.chat.member_count,
                triggered_by=str(user_id),
            )
            self.notifications.dispatch(
                [
                    Notification(
                        recipient_id=member_id,
                        event_kind=NotificationEvents.CHAT_FORMED,
                        payload={
                            "chat_id": str(result.chat.id),
                            "queue_id": str(queue_id),
                            "title": result.chat.title,
                            "member_count": result.chat.member_count,
                        },
                    )
                    for member_id in result.member_ids
                ],
            )
        elif result.joined:
            logger.info(
                "queue_joined",
                queue_id=str(queue_id),
                user_id=str(user_id),
                current_count=result.queue.current_count,
            )
        return result

    async def leave(self, queue_id: UUID, user_id: UUID) -> bool:
        """Withdraw a pending membership. Returns False when nothing changed.

        Only waiting queues are affected; leaving never realizes a queue and
        the creator role is simply vacated.
        """
        left = await run_with_retries(
            "leave",
            lambda: self._leave_once(queue_id, user_id),
            self._max_attempts,
            self._backoff_seconds,
        )
        if left:
            logger.info("queue_left", queue_id=str(queue_id), user_id=str(user_id))
        return left

    async def cancel(self, queue_id: UUID, requester_id: UUID) -> None:
        """Cancel a waiting queue and drop all of its memberships.

        Raises:
            QueueNotFoundError: No such queue.
            AuthorizationError: The requester did not create the queue.
            QueueClosedError: The queue is no longer waiting.
        """
        removed = await run_with_retries(
            "cancel",
            lambda: self._cancel_once(queue_id, requester_id),
            self._max_attempts,
            self._backoff_seconds,
        )
        logger.info(
            "queue_cancelled",
            queue_id=str(queue_id),
            memberships_removed=removed,
        )

    # --- Single attempts (one unit of work each) ---

    async def _join_once(self, queue_id: UUID, user_id: UUID) -> JoinResult:
        async with self._uow_factory() as uow:
            queue = await uow.queues.get(queue_id, for_update=True)
            if not queue:
                raise QueueNotFoundError(str(queue_id))
            if queue.status == QueueStatus.CANCELLED:
                raise QueueClosedError(str(queue_id), queue.status.value)

            existing = await uow.memberships.get(queue_id, user_id)
            if existing:
                chat = await uow.chats.get(existing.chat_id) if existing.chat_id else None
                return JoinResult(queue=queue, joined=False, chat=chat)

            # Capacity first: losing the race for the last seat reads as full.
            if queue.is_full:
                raise QueueFullError(str(queue_id), queue.max_participants)
            if not queue.is_waiting:
                raise QueueClosedError(str(queue_id), queue.status.value)

            expected_version = queue.version
            await uow.memberships.add(Membership.for_queue(queue_id, user_id))

            queue.current_count += 1
            crossed = queue.threshold_reached
            if crossed:
                queue.status = QueueStatus.ACTIVE
            queue = await uow.queues.save(queue, expected_version)

            chat: Chat | None = None
            member_ids: list[UUID] = []
            if crossed:
                chat, member_ids = await self._realize(uow, queue)

            await uow.commit()
            return JoinResult(
                queue=queue,
                joined=True,
                chat=chat,
                realized=crossed,
                member_ids=member_ids,
            )

    async def _realize(self, uow: IUnitOfWork, queue: Queue) -> tuple[Chat, list[UUID]]:
        """Materialize a satisfied queue into its chat inside the caller's unit of work."""
        chat = await uow.chats.create(Chat.from_queue(queue))

        moved = await uow.memberships.repoint_to_chat(queue.id, chat.id)
        if moved != chat.member_count:
            logger.warning(
                "queue_count_drift",
                queue_id=str(queue.id),
                current_count=queue.current_count,
                memberships_moved=moved,
            )

        await uow.chats.add_message(
            Message(
                chat_id=chat.id,
                user_id=queue.creator_id,
                body=f"{chat.title} is now a group chat with {chat.member_count} members",
                type=MessageType.SYSTEM,
            )
        )

        members = await uow.memberships.list_for_chat(chat.id)
        return chat, [m.user_id for m in members]

    async def _leave_once(self, queue_id: UUID, user_id: UUID) -> bool:
        async with self._uow_factory() as uow:
            queue = await uow.queues.get(queue_id, for_update=True)
            if not queue:
                raise QueueNotFoundError(str(queue_id))
            if not queue.is_waiting:
                return False

            expected_version = queue.version
            removed = await uow.memberships.remove(queue_id, user_id)
            if not removed:
                return False

            queue.current_count = max(0, queue.current_count - 1)
            await uow.queues.save(queue, expected_version)
            await uow.commit()
            return True

    async def _cancel_once(self, queue_id: UUID, requester_id: UUID) -> int:
        async with self._uow_factory() as uow:
            queue = await uow.queues.get(queue_id, for_update=True)
            if not queue:
                raise QueueNotFoundError(str(queue_id))
            if queue.creator_id != requester_id:
                raise AuthorizationError("Only the queue creator can cancel it")
            if not queue.is_waiting:
                raise QueueClosedError(str(queue_id), queue.status.value)

            expected_version = queue.version
            queue.status = QueueStatus.CANCELLED
            queue.current_count = 0
            await uow.queues.save(queue, expected_version)
            removed = await uow.memberships.remove_all_for_queue(queue_id)
            await uow.commit()
            return removed
