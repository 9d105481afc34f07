"""
Notification Service Implementations
Transactional dispatcher for use-cases and the recipient inbox
"""
from typing import Callable, List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobmatch.application.schemas import parse_notification_kind, parse_page, parse_uuid
from jobmatch.application.services.notification import INotificationDispatcher, INotificationService
from jobmatch.core.database import get_session_factory
from jobmatch.core.exceptions import (
    NotificationDispatchException,
    NotificationNotFoundException,
    RepositoryException,
)
from jobmatch.core.logging_config import logger
from jobmatch.domain.entities import Notification
from jobmatch.domain.enums import NotificationKind, RelatedType
from jobmatch.infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository


class SQLAlchemyNotificationDispatcher(INotificationDispatcher):
    """
    Writes notifications through the caller's session

    Nothing is committed here: the notification becomes visible only when the
    surrounding unit of work commits, and disappears with it on rollback.
    """

    def __init__(self, session: AsyncSession):
        self.repository = SQLAlchemyNotificationRepository(session)

    async def create_notification(
        self,
        recipient_id: UUID,
        kind: NotificationKind,
        message: str,
        related_id: Optional[UUID] = None,
        related_type: Optional[RelatedType] = None,
    ) -> Notification:
        try:
            notification = await self.repository.create(
                recipient_id=recipient_id,
                kind=kind,
                message=message,
                related_id=related_id,
                related_type=related_type,
            )
            logger.debug(f"Queued {kind.value} notification for {recipient_id}")
            return notification

        except SQLAlchemyError as e:
            logger.error(f"Failed to create {kind.value} notification for {recipient_id}: {e}")
            raise NotificationDispatchException(f"Failed to create notification: {str(e)}") from e


class NotificationService(INotificationService):
    """Notification inbox backed by SQLAlchemy"""

    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        """
        Initialize notification service

        Args:
            session_factory: Session factory, defaults to the process-wide one
        """
        self._session_factory: Callable[[], AsyncSession] = session_factory or get_session_factory()

    async def get_user_notifications(
        self,
        user_id: Union[UUID, str],
        is_read: Optional[bool] = None,
        kind: Optional[Union[NotificationKind, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Notification]:
        """
        Get a user's notifications, newest first

        Args:
            user_id: Recipient user ID
            is_read: Optional read-state filter
            kind: Optional notification kind filter
            limit: Page size, clamped to MAX_PAGE_SIZE
            offset: Pagination offset

        Raises:
            ValidationException: Malformed id, kind or paging arguments
        """
        user_id = parse_uuid(user_id, "user_id")
        kind = parse_notification_kind(kind) if kind is not None else None
        limit, offset = parse_page(limit, offset)
        try:
            async with self._session_factory() as session:
                return await SQLAlchemyNotificationRepository(session).get_for_recipient(
                    user_id, is_read=is_read, kind=kind, limit=limit, offset=offset
                )
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notifications for user {user_id}: {e}")
            raise RepositoryException(f"Failed to get notifications: {str(e)}") from e

    async def get_unread_count(self, user_id: Union[UUID, str]) -> int:
        user_id = parse_uuid(user_id, "user_id")
        try:
            async with self._session_factory() as session:
                return await SQLAlchemyNotificationRepository(session).count_unread(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error counting unread notifications for user {user_id}: {e}")
            raise RepositoryException(f"Failed to count notifications: {str(e)}") from e

    async def mark_as_read(self, notification_id: Union[UUID, str], user_id: Union[UUID, str]) -> Notification:
        notification_id = parse_uuid(notification_id, "notification_id")
        user_id = parse_uuid(user_id, "user_id")
        try:
            async with self._session_factory() as session:
                repository = SQLAlchemyNotificationRepository(session)
                if not await repository.mark_as_read(notification_id, user_id):
                    raise NotificationNotFoundException(notification_id)
                notification = await repository.get_by_id(notification_id)
                await session.commit()
                return notification
        except SQLAlchemyError as e:
            logger.error(f"Error marking notification {notification_id} as read: {e}")
            raise RepositoryException(f"Failed to update notification: {str(e)}") from e

    async def mark_all_as_read(self, user_id: Union[UUID, str]) -> int:
        user_id = parse_uuid(user_id, "user_id")
        try:
            async with self._session_factory() as session:
                updated = await SQLAlchemyNotificationRepository(session).mark_all_as_read(user_id)
                await session.commit()
                logger.info(f"Marked {updated} notifications as read for user {user_id}")
                return updated
        except SQLAlchemyError as e:
            logger.error(f"Error marking notifications as read for user {user_id}: {e}")
            raise RepositoryException(f"Failed to update notifications: {str(e)}") from e

    async def delete_notification(self, notification_id: Union[UUID, str], user_id: Union[UUID, str]) -> None:
        notification_id = parse_uuid(notification_id, "notification_id")
        user_id = parse_uuid(user_id, "user_id")
        try:
            async with self._session_factory() as session:
                if not await SQLAlchemyNotificationRepository(session).delete_for_recipient(notification_id, user_id):
                    raise NotificationNotFoundException(notification_id)
                await session.commit()
                logger.info(f"Deleted notification {notification_id} for user {user_id}")
        except SQLAlchemyError as e:
            logger.error(f"Error deleting notification {notification_id}: {e}")
            raise RepositoryException(f"Failed to delete notification: {str(e)}") from e

    async def delete_all_read(self, user_id: Union[UUID, str]) -> int:
        user_id = parse_uuid(user_id, "user_id")
        try:
            async with self._session_factory() as session:
                deleted = await SQLAlchemyNotificationRepository(session).delete_all_read(user_id)
                await session.commit()
                logger.info(f"Deleted {deleted} read notifications for user {user_id}")
                return deleted
        except SQLAlchemyError as e:
            logger.error(f"Error deleting read notifications for user {user_id}: {e}")
            raise RepositoryException(f"Failed to delete notifications: {str(e)}") from e
