"""ORM Models Package"""

from .application import (
    ApplicationModel,
    ApplicationNoteModel,
    ApplicationInterviewModel,
    APPLICATION_UNIQUE_CONSTRAINT,
)
from .candidate_skill import CandidateSkillModel
from .job import JobModel, JobApplicationLinkModel
from .notification import NotificationModel

__all__ = [
    "ApplicationModel",
    "ApplicationNoteModel",
    "ApplicationInterviewModel",
    "APPLICATION_UNIQUE_CONSTRAINT",
    "CandidateSkillModel",
    "JobModel",
    "JobApplicationLinkModel",
    "NotificationModel",
]
