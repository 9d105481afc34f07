"""
Notification ORM Model
"""
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, Uuid, Index
from sqlalchemy.sql import func

from jobmatch.core.database import Base


class NotificationModel(Base):
    """Notification table ORM model"""

    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    recipient_id = Column(Uuid(as_uuid=True), nullable=False)
    kind = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Uuid(as_uuid=True), nullable=True)
    related_type = Column(String(30), nullable=True)

    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        # Unread lookups per recipient
        Index("ix_notifications_recipient_id_is_read", "recipient_id", "is_read"),
    )

    def __repr__(self):
        return f"<NotificationModel {self.kind} -> {self.recipient_id}>"
