"""
Custom Exception Hierarchy
Domain and application-level exceptions raised by the application engine
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain errors"""
    pass


class ValidationException(DomainException):
    """Data validation failed"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class JobNotFoundException(ResourceNotFoundException):

    def __init__(self, job_id):
        super().__init__("Job", str(job_id))


class ApplicationNotFoundException(ResourceNotFoundException):

    def __init__(self, application_id):
        super().__init__("Application", str(application_id))


class NotificationNotFoundException(ResourceNotFoundException):

    def __init__(self, notification_id):
        super().__init__("Notification", str(notification_id))


class StateConflictException(DomainException):
    """Request conflicts with the current persisted state"""
    pass


class JobInactiveException(StateConflictException):
    """Job is no longer accepting applications"""

    def __init__(self, job_id, status: str):
        self.job_id = job_id
        self.status = status
        super().__init__(f"Job {job_id} is not accepting applications (status={status})")


class DuplicateApplicationException(StateConflictException):
    """Applicant already has an application for this job"""

    def __init__(self, job_id, applicant_id):
        self.job_id = job_id
        self.applicant_id = applicant_id
        super().__init__(f"Applicant {applicant_id} has already applied to job {job_id}")


class InvalidTransitionException(StateConflictException):
    """Requested status change is not in the transition table"""

    def __init__(self, current: str, requested: str, reason: Optional[str] = None):
        self.current = current
        self.requested = requested
        message = f"Cannot move application from '{current}' to '{requested}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AlreadyTerminalException(StateConflictException):
    """Application is already in a terminal status"""

    def __init__(self, application_id, status: str):
        self.application_id = application_id
        self.status = status
        super().__init__(f"Application {application_id} is already {status}")


class DependencyException(DomainException):
    """A collaborator (store, dispatcher) failed mid-transaction"""
    pass


class RepositoryException(DependencyException):
    """Database operation failed"""
    pass


class NotificationDispatchException(DependencyException):
    """Notification could not be created"""
    pass
