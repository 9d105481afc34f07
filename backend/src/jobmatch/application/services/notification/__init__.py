"""
Notification Service Interfaces
Dispatcher used inside use-case transactions, plus the recipient's inbox
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Union
from uuid import UUID

from jobmatch.domain.entities import Notification
from jobmatch.domain.enums import NotificationKind, RelatedType


class INotificationDispatcher(ABC):
    """Creates notifications within the caller's transaction scope"""

    @abstractmethod
    async def create_notification(
        self,
        recipient_id: UUID,
        kind: NotificationKind,
        message: str,
        related_id: Optional[UUID] = None,
        related_type: Optional[RelatedType] = None,
    ) -> Notification:
        """
        Create a notification

        Raises:
            NotificationDispatchException: If the notification cannot be stored
        """
        pass


class INotificationService(ABC):
    """Notification inbox interface"""

    @abstractmethod
    async def get_user_notifications(
        self,
        user_id: Union[UUID, str],
        is_read: Optional[bool] = None,
        kind: Optional[Union[NotificationKind, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Notification]:
        """Notifications for a user, newest first"""
        pass

    @abstractmethod
    async def get_unread_count(self, user_id: Union[UUID, str]) -> int:
        pass

    @abstractmethod
    async def mark_as_read(self, notification_id: Union[UUID, str], user_id: Union[UUID, str]) -> Notification:
        """Mark one of the user's notifications as read"""
        pass

    @abstractmethod
    async def mark_all_as_read(self, user_id: Union[UUID, str]) -> int:
        """Mark every unread notification as read, returning how many changed"""
        pass

    @abstractmethod
    async def delete_notification(self, notification_id: Union[UUID, str], user_id: Union[UUID, str]) -> None:
        """
        Delete one of the user's notifications

        Raises:
            NotificationNotFoundException: If the id is unknown or belongs to another user
        """
        pass

    @abstractmethod
    async def delete_all_read(self, user_id: Union[UUID, str]) -> int:
        """Delete every read notification of the user, returning how many were removed"""
        pass
