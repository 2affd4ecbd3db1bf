"""Unit tests for ChatService."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import AuthorizationError, ChatClosedError, ChatNotFoundError
from domain.entities.chat import Chat, ChatStatus, Message, MessageType
from domain.entities.membership import ChatTarget, Membership, MembershipRole
from domain.entities.notification import NotificationEvents
from domain.entities.profile import Profile
from domain.services.chat_service import PREVIEW_LENGTH, ChatService
from tests.unit.conftest import FakeNotifier, FakeUnitOfWork


@pytest.fixture
def chat() -> Chat:
    return Chat(queue_id=uuid4(), title="Evening prayer", member_count=3)


@pytest.fixture
def service(uow: FakeUnitOfWork, notifier: FakeNotifier) -> ChatService:
    return ChatService(lambda: uow, notifier=notifier)


def _member(chat: Chat, user_id: UUID, role: MembershipRole = MembershipRole.MEMBER) -> Membership:
    return Membership(queue_id=chat.queue_id, user_id=user_id, target=ChatTarget(chat.id), role=role)


def _store_messages(uow: FakeUnitOfWork) -> None:
    async def add_message(message: Message) -> Message:
        message.id = 7
        return message

    uow.chats.add_message.side_effect = add_message


class TestReads:
    @pytest.mark.asyncio
    async def test_get_chat(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)

        assert await service.get_chat(chat.id, user_id) is chat
        uow.memberships.get_for_chat.assert_called_once_with(chat.id, user_id)

    @pytest.mark.asyncio
    async def test_get_chat_not_found(
        self, service: ChatService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.chats.get.return_value = None

        with pytest.raises(ChatNotFoundError):
            await service.get_chat(uuid4(), user_id)

    @pytest.mark.asyncio
    async def test_get_chat_hidden_from_non_members(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = None

        with pytest.raises(AuthorizationError):
            await service.get_chat(chat.id, user_id)

    @pytest.mark.asyncio
    async def test_list_my_chats(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get_for_user.return_value = [chat]

        assert await service.list_my_chats(user_id) == [chat]
        uow.chats.get_for_user.assert_called_once_with(user_id)

    @pytest.mark.asyncio
    async def test_list_messages(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        messages = [
            Message(chat_id=chat.id, user_id=uuid4(), body="first", id=1),
            Message(chat_id=chat.id, user_id=uuid4(), body="second", id=2),
        ]
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)
        uow.chats.get_messages.return_value = messages

        assert await service.list_messages(chat.id, user_id) == messages

    @pytest.mark.asyncio
    async def test_list_messages_chat_not_found(
        self, service: ChatService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.chats.get.return_value = None

        with pytest.raises(ChatNotFoundError):
            await service.list_messages(uuid4(), user_id)

        uow.chats.get_messages.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_messages_hidden_from_non_members(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = None

        with pytest.raises(AuthorizationError):
            await service.list_messages(chat.id, user_id)

        uow.chats.get_messages.assert_not_called()


class TestGetMembers:
    @pytest.mark.asyncio
    async def test_joins_profiles(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        creator, member = uuid4(), uuid4()
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, member)
        uow.memberships.list_for_chat.return_value = [
            _member(chat, creator, MembershipRole.CREATOR),
            _member(chat, member),
        ]
        uow.profiles.get_many.return_value = {
            creator: Profile(id=creator, display_name="Anna", avatar_url="https://img/a.png"),
        }

        members = await service.get_members(chat.id, member)

        assert [m.user_id for m in members] == [creator, member]
        assert members[0].role == "creator"
        assert members[0].display_name == "Anna"
        assert members[0].avatar_url == "https://img/a.png"
        assert members[1].role == "member"
        assert members[1].display_name is None
        uow.profiles.get_many.assert_called_once_with([creator, member])

    @pytest.mark.asyncio
    async def test_chat_not_found(
        self, service: ChatService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.chats.get.return_value = None

        with pytest.raises(ChatNotFoundError):
            await service.get_members(uuid4(), user_id)

    @pytest.mark.asyncio
    async def test_hidden_from_non_members(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = None

        with pytest.raises(AuthorizationError):
            await service.get_members(chat.id, user_id)

        uow.memberships.list_for_chat.assert_not_called()


class TestPostMessage:
    @pytest.mark.asyncio
    async def test_member_posts(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)
        uow.memberships.list_for_chat.return_value = [_member(chat, user_id)]
        _store_messages(uow)

        message = await service.post_message(chat.id, user_id, "Hello all")

        assert message.id == 7
        assert message.body == "Hello all"
        assert message.type == MessageType.MESSAGE
        assert message.user_id == user_id
        assert uow.committed

    @pytest.mark.asyncio
    async def test_prayer_request(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)
        uow.memberships.list_for_chat.return_value = []
        _store_messages(uow)

        message = await service.post_message(
            chat.id, user_id, "Please pray for my mother", MessageType.PRAYER_REQUEST
        )

        assert message.type == MessageType.PRAYER_REQUEST

    @pytest.mark.asyncio
    async def test_notifies_other_members_only(
        self,
        service: ChatService,
        uow: FakeUnitOfWork,
        notifier: FakeNotifier,
        chat: Chat,
        user_id: UUID,
    ):
        others = [uuid4(), uuid4()]
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)
        uow.memberships.list_for_chat.return_value = [
            _member(chat, others[0]),
            _member(chat, user_id),
            _member(chat, others[1]),
        ]
        _store_messages(uow)
        body = "x" * (PREVIEW_LENGTH + 50)

        await service.post_message(chat.id, user_id, body)
        await service.notifications.drain()

        assert [r for r, _, _ in notifier.sent] == others
        _, kind, payload = notifier.sent[0]
        assert kind == NotificationEvents.CHAT_MESSAGE
        assert payload["chat_id"] == str(chat.id)
        assert payload["author_id"] == str(user_id)
        assert payload["message_id"] == 7
        assert len(payload["preview"]) == PREVIEW_LENGTH

    @pytest.mark.asyncio
    async def test_notifier_failure_is_swallowed(
        self, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        service = ChatService(lambda: uow, notifier=FakeNotifier(fail=True))
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = _member(chat, user_id)
        uow.memberships.list_for_chat.return_value = [_member(chat, uuid4())]
        _store_messages(uow)

        message = await service.post_message(chat.id, user_id, "Still saved")
        await service.notifications.drain()

        assert message.id == 7
        assert uow.committed

    @pytest.mark.asyncio
    async def test_non_member_rejected(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        uow.chats.get.return_value = chat
        uow.memberships.get_for_chat.return_value = None

        with pytest.raises(AuthorizationError):
            await service.post_message(chat.id, user_id, "Let me in")

        uow.chats.add_message.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_archived_chat_rejected(
        self, service: ChatService, uow: FakeUnitOfWork, chat: Chat, user_id: UUID
    ):
        chat.status = ChatStatus.ARCHIVED
        uow.chats.get.return_value = chat

        with pytest.raises(ChatClosedError):
            await service.post_message(chat.id, user_id, "Anyone?")

        uow.chats.add_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_chat_not_found(self, service: ChatService, uow: FakeUnitOfWork, user_id: UUID):
        uow.chats.get.return_value = None

        with pytest.raises(ChatNotFoundError):
            await service.post_message(uuid4(), user_id, "Hello")
