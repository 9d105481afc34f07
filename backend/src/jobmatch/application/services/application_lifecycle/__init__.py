"""
Application Lifecycle Service Interface
Atomic use-cases that create and move applications through review
"""
from abc import ABC, abstractmethod
from typing import AbstractSet, Hashable, Optional, Union
from uuid import UUID

from jobmatch.application.schemas import ApplicationSubmission, InterviewRequest
from jobmatch.domain.entities import Application
from jobmatch.domain.enums import ApplicationStatus


class IApplicationLifecycleService(ABC):
    """Application lifecycle service interface"""

    @abstractmethod
    async def submit_application(
        self,
        job_id: Union[UUID, str],
        applicant_id: Union[UUID, str],
        payload: Union[ApplicationSubmission, dict]
    ) -> Application:
        """
        Submit a candidacy for an active job

        Creates the application, bumps the job's counter and list and notifies
        the job owner in one transaction.

        Args:
            job_id: Job to apply to
            applicant_id: Candidate user ID
            payload: resume_url, cover_letter, answers

        Returns:
            The pending Application

        Raises:
            ValidationException, JobNotFoundException, JobInactiveException,
            DuplicateApplicationException
        """
        pass

    @abstractmethod
    async def update_application_status(
        self,
        application_id: Union[UUID, str],
        new_status: Union[ApplicationStatus, str],
        note: Optional[str] = None,
        actor_id: Optional[UUID] = None
    ) -> Application:
        """
        Move an application along the transition table and notify the applicant

        Raises:
            ValidationException, ApplicationNotFoundException, InvalidTransitionException
        """
        pass

    @abstractmethod
    async def withdraw_application(
        self,
        application_id: Union[UUID, str],
        reason: Optional[str] = None,
        actor_id: Optional[UUID] = None
    ) -> Application:
        """
        Withdraw a non-terminal application and notify the job owner

        Raises:
            ApplicationNotFoundException, AlreadyTerminalException
        """
        pass

    @abstractmethod
    async def schedule_interview(
        self,
        application_id: Union[UUID, str],
        interview: Union[InterviewRequest, dict],
        actor_id: Optional[UUID] = None
    ) -> Application:
        """Append an interview, moving reviewing applications to interviewed"""
        pass

    @abstractmethod
    async def add_note(
        self,
        application_id: Union[UUID, str],
        content: str,
        author_id: Optional[UUID] = None
    ) -> Application:
        """Append an audit note without changing status"""
        pass

    @abstractmethod
    async def recompute_match_score(self, application_id: Union[UUID, str]) -> Application:
        """Recalculate and store the match score from current skill sets"""
        pass

    @abstractmethod
    def compute_match_score(
        self,
        required_skills: AbstractSet[Hashable],
        preferred_skills: AbstractSet[Hashable],
        candidate_skills: AbstractSet[Hashable]
    ) -> int:
        """Pure 0-100 skill match score"""
        pass
