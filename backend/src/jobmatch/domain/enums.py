"""
Domain Enums
Closed business enumerations for applications, jobs and notifications
"""
from enum import Enum


class ApplicationStatus(str, Enum):
    """Status of a job application"""
    PENDING = "pending"
    REVIEWING = "reviewing"
    INTERVIEWED = "interviewed"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobStatus(str, Enum):
    """Job posting status"""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class NotificationKind(str, Enum):
    """What a notification is about"""
    NEW_APPLICATION = "newApplication"
    APPLICATION_STATUS_UPDATE = "applicationStatusUpdate"
    APPLICATION_WITHDRAWN = "applicationWithdrawn"
    INTERVIEW_SCHEDULED = "interviewScheduled"


class RelatedType(str, Enum):
    """Kind of record a notification points at"""
    JOB = "job"
    APPLICATION = "application"
    MESSAGE = "message"
    CONVERSATION = "conversation"
    USER = "user"


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELED = "canceled"
    RESCHEDULED = "rescheduled"
