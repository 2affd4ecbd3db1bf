"""Group chat API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_chat_service
from api.v1.schemas.chat import (
    ChatDetailResponse,
    ChatListResponse,
    ChatMemberListResponse,
    ChatMemberResponse,
    ChatResponse,
    MessageCreate,
    MessageDetailResponse,
    MessageListResponse,
    MessageResponse,
)
from api.v1.schemas.common import ErrorResponse
from core.rate_limit import limiter
from domain.entities.chat import Chat, Message, MessageType
from domain.services.chat_service import ChatService

router = APIRouter(
    prefix="/chats",
    tags=["chats"],
)


@router.get(
    "",
    response_model=ChatListResponse,
    summary="List my chats",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_chats(
    request: Request,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> ChatListResponse:
    """Get every chat the caller belongs to."""
    chats = await service.list_my_chats(user.id)
    data = [build_chat_response(c) for c in chats]
    return ChatListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/{chat_id}",
    response_model=ChatDetailResponse,
    summary="Get a chat",
    responses={
        403: {"model": ErrorResponse, "description": "Not a chat member"},
        404: {"model": ErrorResponse, "description": "Chat not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_chat(
    request: Request,
    chat_id: UUID,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> ChatDetailResponse:
    chat = await service.get_chat(chat_id, user.id)
    return ChatDetailResponse(data=build_chat_response(chat))


@router.get(
    "/{chat_id}/members",
    response_model=ChatMemberListResponse,
    summary="List chat members",
    responses={
        403: {"model": ErrorResponse, "description": "Not a chat member"},
        404: {"model": ErrorResponse, "description": "Chat not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_chat_members(
    request: Request,
    chat_id: UUID,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> ChatMemberListResponse:
    members = await service.get_members(chat_id, user.id)
    data = [
        ChatMemberResponse(
            user_id=m.user_id,
            role=m.role,
            joined_at=m.joined_at,
            display_name=m.display_name,
            avatar_url=m.avatar_url,
        )
        for m in members
    ]
    return ChatMemberListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/{chat_id}/messages",
    response_model=MessageListResponse,
    summary="List chat messages",
    responses={
        403: {"model": ErrorResponse, "description": "Not a chat member"},
        404: {"model": ErrorResponse, "description": "Chat not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_messages(
    request: Request,
    chat_id: UUID,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> MessageListResponse:
    """Get the chat log in posting order."""
    messages = await service.list_messages(chat_id, user.id)
    data = [_build_message_response(m) for m in messages]
    return MessageListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{chat_id}/messages",
    response_model=MessageDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a message",
    responses={
        403: {"model": ErrorResponse, "description": "Not a chat member"},
        404: {"model": ErrorResponse, "description": "Chat not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def post_message(
    request: Request,
    chat_id: UUID,
    body: MessageCreate,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> MessageDetailResponse:
    """Post to a chat. Members only."""
    message = await service.post_message(
        chat_id,
        user.id,
        body.body,
        message_type=MessageType(body.type),
    )
    return MessageDetailResponse(data=_build_message_response(message))


def build_chat_response(chat: Chat) -> ChatResponse:
    """Convert domain entity to response schema."""
    return ChatResponse(
        id=chat.id,
        queue_id=chat.queue_id,
        title=chat.title,
        description=chat.description,
        intention=chat.intention,
        member_count=chat.member_count,
        status=chat.status.value,
        created_at=chat.created_at,
        updated_at=chat.updated_at,
    )


def _build_message_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id or 0,
        chat_id=message.chat_id,
        user_id=message.user_id,
        body=message.body,
        type=message.type.value,
        created_at=message.created_at,
    )
