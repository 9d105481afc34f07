"""
Application Domain Entity
Immutable job application business object
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from ..enums import ApplicationStatus, InterviewStatus, InterviewType
from ..transitions import is_terminal


@dataclass(frozen=True)
class ApplicationAnswer:
    """Answer to a screening question, fixed at submission"""

    question: str
    answer: str


@dataclass(frozen=True)
class ApplicationNote:
    """Audit log entry"""

    content: str
    author_id: Optional[UUID] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Interview:
    """Scheduled interview for an application"""

    scheduled_at: datetime
    interview_type: InterviewType
    location: Optional[str] = None
    interviewer_ids: Tuple[UUID, ...] = ()
    status: InterviewStatus = InterviewStatus.SCHEDULED
    feedback: Optional[str] = None


@dataclass(frozen=True)
class Application:
    """Job application domain entity - immutable"""

    id: UUID
    job_id: UUID
    applicant_id: UUID
    company_id: UUID

    # Application details
    status: ApplicationStatus
    resume_url: str
    cover_letter: Optional[str] = None
    answers: Tuple[ApplicationAnswer, ...] = ()

    # Review trail
    notes: Tuple[ApplicationNote, ...] = ()
    interviews: Tuple[Interview, ...] = ()

    match_score: int = 0

    # Withdrawal
    is_withdrawn: bool = False
    withdraw_reason: Optional[str] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate application data"""
        if not 0 <= self.match_score <= 100:
            raise ValueError("Match score must be between 0 and 100")

    def is_pending(self) -> bool:
        """Check if application is pending"""
        return self.status == ApplicationStatus.PENDING

    def is_terminal(self) -> bool:
        """Check if application is in terminal state"""
        return is_terminal(self.status)

    def __str__(self) -> str:
        return f"Application({self.id}, status={self.status.value})"
