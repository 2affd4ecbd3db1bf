"""Chat service layer: reading realized chats and posting to them."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import AuthorizationError, ChatClosedError, ChatNotFoundError
from domain.entities.chat import Chat, ChatMember, ChatStatus, Message, MessageType
from domain.entities.notification import Notification, NotificationEvents
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notifier import INotifier, NotificationDispatcher

logger = structlog.get_logger()

PREVIEW_LENGTH = 120


class ChatService:
    """Service layer for group chats and their message log."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: INotifier | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self.notifications = dispatcher or NotificationDispatcher(notifier)

    async def get_chat(self, chat_id: UUID, user_id: UUID) -> Chat:
        """Get a chat the user belongs to."""
        async with self._uow_factory() as uow:
            return await self._get_for_member(uow, chat_id, user_id)

    async def list_my_chats(self, user_id: UUID) -> list[Chat]:
        """Get every chat the user is a member of."""
        async with self._uow_factory() as uow:
            return await uow.chats.get_for_user(user_id)

    async def get_members(self, chat_id: UUID, user_id: UUID) -> list[ChatMember]:
        """Get a chat's members with display fields from the identity mirror."""
        async with self._uow_factory() as uow:
            await self._get_for_member(uow, chat_id, user_id)

            memberships = await uow.memberships.list_for_chat(chat_id)
            profiles = await uow.profiles.get_many([m.user_id for m in memberships])

            members: list[ChatMember] = []
            for membership in memberships:
                profile = profiles.get(membership.user_id)
                members.append(
                    ChatMember(
                        user_id=membership.user_id,
                        role=membership.role.value,
                        joined_at=membership.joined_at,
                        display_name=profile.display_name if profile else None,
                        avatar_url=profile.avatar_url if profile else None,
                    )
                )
            return members

    async def list_messages(self, chat_id: UUID, user_id: UUID) -> list[Message]:
        """Get the chat log, oldest first."""
        async with self._uow_factory() as uow:
            await self._get_for_member(uow, chat_id, user_id)
            return await uow.chats.get_messages(chat_id)

    async def post_message(
        self,
        chat_id: UUID,
        user_id: UUID,
        body: str,
        message_type: MessageType = MessageType.MESSAGE,
    ) -> Message:
        """Append a message to a chat and notify the other members.

        Raises:
            ChatNotFoundError: No such chat.
            ChatClosedError: The chat is archived.
            AuthorizationError: The author is not a member.
        """
        async with self._uow_factory() as uow:
            chat = await uow.chats.get(chat_id)
            if not chat:
                raise ChatNotFoundError(str(chat_id))
            if chat.status != ChatStatus.ACTIVE:
                raise ChatClosedError(str(chat_id))

            membership = await uow.memberships.get_for_chat(chat_id, user_id)
            if not membership:
                raise AuthorizationError("Only chat members can post messages")

            message = await uow.chats.add_message(
                Message(chat_id=chat_id, user_id=user_id, body=body, type=message_type)
            )
            members = await uow.memberships.list_for_chat(chat_id)
            await uow.commit()

        logger.info(
            "chat_message_posted",
            chat_id=str(chat_id),
            message_id=message.id,
            message_type=message.type.value,
        )

        self.notifications.dispatch(
            [
                Notification(
                    recipient_id=member.user_id,
                    event_kind=NotificationEvents.CHAT_MESSAGE,
                    payload={
                        "chat_id": str(chat_id),
                        "message_id": message.id,
                        "author_id": str(user_id),
                        "type": message.type.value,
                        "preview": body[:PREVIEW_LENGTH],
                    },
                )
                for member in members
                if member.user_id != user_id
            ],
        )
        return message

    async def _get_for_member(self, uow: IUnitOfWork, chat_id: UUID, user_id: UUID) -> Chat:
        """Load a chat, hiding its roster and log from non-members.

        Raises:
            ChatNotFoundError: No such chat.
            AuthorizationError: The user is not a member.
        """
        chat = await uow.chats.get(chat_id)
        if not chat:
            raise ChatNotFoundError(str(chat_id))
        if not await uow.memberships.get_for_chat(chat_id, user_id):
            raise AuthorizationError("Only chat members can view this chat")
        return chat
