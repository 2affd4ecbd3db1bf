"""Chat repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.chat import Chat, Message


class IChatRepository(Protocol):
    """Repository interface for chats and their message log."""

    async def get(self, id: UUID) -> Chat | None:
        """Get a chat by ID."""
        ...

    async def get_for_user(self, user_id: UUID) -> list[Chat]:
        """Get all chats a user is a member of, newest first."""
        ...

    async def create(self, chat: Chat) -> Chat:
        """Create a new chat.

        Raises:
            StoreConflictError: The queue already has a chat.
        """
        ...

    async def add_message(self, message: Message) -> Message:
        """Append a message and return it with its sequence id."""
        ...

    async def get_messages(self, chat_id: UUID) -> list[Message]:
        """Get a chat's messages ordered by creation time, then sequence."""
        ...
