"""
Notification Repository Implementation
SQLAlchemy async repository for notifications
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from jobmatch.domain.entities import Notification
from jobmatch.domain.enums import NotificationKind, RelatedType
from jobmatch.infrastructure.persistence.models.notification import NotificationModel


class SQLAlchemyNotificationRepository:
    """Notification repository using SQLAlchemy"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def create(
        self,
        recipient_id: UUID,
        kind: NotificationKind,
        message: str,
        related_id: Optional[UUID] = None,
        related_type: Optional[RelatedType] = None,
    ) -> Notification:
        """Create new notification"""
        model = NotificationModel(
            id=uuid.uuid4(),
            recipient_id=recipient_id,
            kind=kind.value,
            message=message,
            related_id=related_id,
            related_type=related_type.value if related_type else None,
            is_read=False,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(model)
        await self.db.flush()
        return self._model_to_entity(model)

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        result = await self.db.execute(
            select(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def get_for_recipient(
        self,
        recipient_id: UUID,
        is_read: Optional[bool] = None,
        kind: Optional[NotificationKind] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Notification]:
        """Get notifications for a recipient, newest first"""
        query = select(NotificationModel).where(NotificationModel.recipient_id == recipient_id)
        if is_read is not None:
            query = query.where(NotificationModel.is_read == is_read)
        if kind is not None:
            query = query.where(NotificationModel.kind == kind.value)
        query = query.order_by(NotificationModel.created_at.desc()).limit(limit).offset(offset)

        result = await self.db.execute(query)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def count_unread(self, recipient_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_as_read(self, notification_id: UUID, recipient_id: UUID) -> bool:
        """Mark a notification read if it belongs to recipient_id"""
        result = await self.db.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
            .values(
                is_read=True,
                read_at=func.coalesce(NotificationModel.read_at, datetime.now(timezone.utc)),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def mark_all_as_read(self, recipient_id: UUID) -> int:
        result = await self.db.execute(
            update(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_recipient(self, notification_id: UUID, recipient_id: UUID) -> bool:
        """Delete a notification if it belongs to recipient_id"""
        result = await self.db.execute(
            delete(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_all_read(self, recipient_id: UUID) -> int:
        result = await self.db.execute(
            delete(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(True),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _model_to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            kind=NotificationKind(model.kind),
            message=model.message,
            related_id=model.related_id,
            related_type=RelatedType(model.related_type) if model.related_type else None,
            is_read=model.is_read,
            read_at=model.read_at,
            created_at=model.created_at,
        )
