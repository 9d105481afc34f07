"""
Dependency Container
Manages service instances for embedding applications
"""
from typing import Optional

from jobmatch.application.services.application_lifecycle import IApplicationLifecycleService
from jobmatch.application.services.application_tracking import IApplicationTrackingService
from jobmatch.application.services.notification import INotificationService
from jobmatch.infrastructure.services.application_lifecycle_service import ApplicationLifecycleService
from jobmatch.infrastructure.services.application_tracking_service import ApplicationTrackingService
from jobmatch.infrastructure.services.notification_service import NotificationService


# Singleton instances
_lifecycle_service: Optional[IApplicationLifecycleService] = None
_tracking_service: Optional[IApplicationTrackingService] = None
_notification_service: Optional[INotificationService] = None


def get_application_lifecycle_service() -> IApplicationLifecycleService:
    """Get application lifecycle service instance (singleton)"""
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = ApplicationLifecycleService()
    return _lifecycle_service


def get_application_tracking_service() -> IApplicationTrackingService:
    """Get application tracking service instance (singleton)"""
    global _tracking_service
    if _tracking_service is None:
        _tracking_service = ApplicationTrackingService()
    return _tracking_service


def get_notification_service() -> INotificationService:
    """Get notification service instance (singleton)"""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service


def reset_services() -> None:
    """Drop cached instances, e.g. after close_db() or in tests"""
    global _lifecycle_service, _tracking_service, _notification_service
    _lifecycle_service = None
    _tracking_service = None
    _notification_service = None
