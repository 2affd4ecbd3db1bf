"""Queue API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_matchmaker_service, get_profile_service
from api.v1.routes.chats import build_chat_response
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.queue import (
    JoinQueueResponse,
    JoinQueueResult,
    QueueCreate,
    QueueDetailResponse,
    QueueListResponse,
    QueueResponse,
)
from core.rate_limit import limiter
from domain.entities.queue import Queue
from domain.services.matchmaker_service import MatchmakerService
from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import TokenUser

router = APIRouter(
    prefix="/queues",
    tags=["queues"],
)


@router.get(
    "",
    response_model=QueueListResponse,
    summary="List waiting queues",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_waiting_queues(
    request: Request,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
) -> QueueListResponse:
    """Get every queue still collecting participants."""
    queues = await service.list_waiting_queues()
    data = [build_queue_response(q) for q in queues]
    return QueueListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=QueueDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Propose a queue",
    responses={
        201: {"description": "Queue created with the caller enrolled"},
        400: {"model": ErrorResponse, "description": "Invalid participant bounds"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_queue(
    request: Request,
    body: QueueCreate,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
    profiles: ProfileService = Depends(get_profile_service),
) -> QueueDetailResponse:
    """Create a queue; the caller becomes its creator and first member."""
    await _remember_caller(profiles, user)
    queue = await service.create_queue(
        creator_id=user.id,
        title=body.title,
        description=body.description,
        intention=body.intention,
        min_participants=body.min_participants,
        max_participants=body.max_participants,
    )
    return QueueDetailResponse(data=build_queue_response(queue))


@router.get(
    "/{queue_id}",
    response_model=QueueDetailResponse,
    summary="Get a queue",
    responses={404: {"model": ErrorResponse, "description": "Queue not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_queue(
    request: Request,
    queue_id: UUID,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
) -> QueueDetailResponse:
    """Get a single queue in any state."""
    queue = await service.get_queue(queue_id)
    return QueueDetailResponse(data=build_queue_response(queue))


@router.post(
    "/{queue_id}/join",
    response_model=JoinQueueResponse,
    summary="Join a queue",
    responses={
        200: {"description": "Joined (or already a member); chat included once formed"},
        404: {"model": ErrorResponse, "description": "Queue not found"},
        409: {"model": ErrorResponse, "description": "Queue full or closed"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_queue(
    request: Request,
    queue_id: UUID,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
    profiles: ProfileService = Depends(get_profile_service),
) -> JoinQueueResponse:
    """Join a waiting queue. Repeating the call is harmless."""
    await _remember_caller(profiles, user)
    result = await service.join(queue_id, user.id)
    return JoinQueueResponse(
        data=JoinQueueResult(
            joined=result.joined,
            realized=result.realized,
            queue=build_queue_response(result.queue),
            chat=build_chat_response(result.chat) if result.chat else None,
        )
    )


@router.post(
    "/{queue_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave a queue",
    responses={404: {"model": ErrorResponse, "description": "Queue not found"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_queue(
    request: Request,
    queue_id: UUID,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
) -> None:
    """Withdraw from a waiting queue. A no-op when not a member."""
    await service.leave(queue_id, user.id)
    return None


@router.post(
    "/{queue_id}/cancel",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a queue",
    responses={
        403: {"model": ErrorResponse, "description": "Only the creator can cancel"},
        404: {"model": ErrorResponse, "description": "Queue not found"},
        409: {"model": ErrorResponse, "description": "Queue already closed"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def cancel_queue(
    request: Request,
    queue_id: UUID,
    user: CurrentUser,
    service: MatchmakerService = Depends(get_matchmaker_service),
) -> None:
    """Cancel a waiting queue. Creator only."""
    await service.cancel(queue_id, user.id)
    return None


async def _remember_caller(profiles: ProfileService, user: TokenUser) -> None:
    await profiles.remember(
        user.id,
        email=user.email,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
    )


def build_queue_response(queue: Queue) -> QueueResponse:
    """Convert domain entity to response schema."""
    return QueueResponse(
        id=queue.id,
        title=queue.title,
        description=queue.description,
        intention=queue.intention,
        min_participants=queue.min_participants,
        max_participants=queue.max_participants,
        current_count=queue.current_count,
        status=queue.status.value,
        creator_id=queue.creator_id,
        created_at=queue.created_at,
        updated_at=queue.updated_at,
    )
