"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.chat_service import ChatService
from domain.services.matchmaker_service import MatchmakerService
from domain.services.notifier import NotificationDispatcher
from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.notifications.log_notifier import LogNotifier
from infrastructure.notifications.webhook_notifier import WebhookNotifier


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_notifier() -> LogNotifier | WebhookNotifier:
    """Get the notifier: webhook delivery when configured, log-only otherwise."""
    if settings.notifier_webhook_url:
        return WebhookNotifier(
            settings.notifier_webhook_url,
            timeout_seconds=settings.notifier_timeout_seconds,
        )
    return LogNotifier()


@lru_cache
def get_dispatcher() -> NotificationDispatcher:
    """Get the process-wide background notification dispatcher."""
    return NotificationDispatcher(get_notifier())


@lru_cache
def get_matchmaker_service() -> MatchmakerService:
    """Get Matchmaker service instance."""
    return MatchmakerService(
        get_uow_factory(),
        dispatcher=get_dispatcher(),
        max_attempts=settings.matchmaker_max_attempts,
        backoff_seconds=settings.matchmaker_backoff_seconds,
    )


@lru_cache
def get_chat_service() -> ChatService:
    """Get Chat service instance."""
    return ChatService(get_uow_factory(), dispatcher=get_dispatcher())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())
