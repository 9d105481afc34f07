"""
Notification Domain Entity
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import NotificationKind, RelatedType


@dataclass(frozen=True)
class Notification:
    """In-app notification addressed to one user"""

    id: UUID
    recipient_id: UUID
    kind: NotificationKind
    message: str
    related_id: Optional[UUID] = None
    related_type: Optional[RelatedType] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
