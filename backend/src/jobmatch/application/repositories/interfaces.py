"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, FrozenSet, List, Optional
from uuid import UUID

from jobmatch.domain.entities import Application, ApplicationNote, Interview, Job
from jobmatch.domain.enums import ApplicationStatus
from jobmatch.application.services.notification import INotificationDispatcher


class IJobRepository(ABC):
    """Job directory: read access plus the aggregate counters this engine owns"""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID without its application list (Job.applications is empty)"""
        pass

    @abstractmethod
    async def get_with_applications(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID with the ordered list of received application ids"""
        pass

    @abstractmethod
    async def increment_application_counter(self, job_id: UUID, application_id: UUID) -> None:
        """
        Atomically bump application_count and append application_id to the job's list

        Raises:
            JobNotFoundException: If the job row no longer exists
        """
        pass


class ISkillDirectory(ABC):
    """Skill directory interface"""

    @abstractmethod
    async def get_candidate_skills(self, user_id: UUID) -> FrozenSet[str]:
        """Skill ids held by a candidate (empty if unknown)"""
        pass


class IApplicationRepository(ABC):
    """Application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        pass

    @abstractmethod
    async def exists_for_job(self, job_id: UUID, applicant_id: UUID) -> bool:
        """Check if applicant already applied to job"""
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """
        Create new application

        Raises:
            DuplicateApplicationException: If the (job, applicant) pair already exists
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        application_id: UUID,
        allowed_from: AbstractSet[ApplicationStatus],
        new_status: ApplicationStatus,
        withdraw_reason: Optional[str] = None,
    ) -> bool:
        """
        Compare-and-set status change

        Only updates the row while its stored status is one of allowed_from.
        Moving to WITHDRAWN also sets is_withdrawn and withdraw_reason.

        Returns:
            True if the row was updated, False if the stored status did not match
        """
        pass

    @abstractmethod
    async def add_note(self, application_id: UUID, note: ApplicationNote) -> None:
        """Append an audit note"""
        pass

    @abstractmethod
    async def add_interview(self, application_id: UUID, interview: Interview) -> None:
        """Append an interview record"""
        pass

    @abstractmethod
    async def update_match_score(self, application_id: UUID, match_score: int) -> None:
        """Persist a recomputed match score"""
        pass

    @abstractmethod
    async def find_by_job(
        self,
        job_id: UUID,
        status: Optional[ApplicationStatus] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        """Applications received by a job, newest first"""
        pass

    @abstractmethod
    async def find_by_applicant(
        self,
        applicant_id: UUID,
        status: Optional[ApplicationStatus] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        """Applications submitted by a candidate, newest first"""
        pass

    @abstractmethod
    async def count_by_status_for_company(self, company_id: UUID) -> Dict[ApplicationStatus, int]:
        """Application counts grouped by status for one company"""
        pass

    @abstractmethod
    async def count_by_status_for_employer(self, employer_id: UUID) -> Dict[ApplicationStatus, int]:
        """Application counts grouped by status over the jobs posted by employer_id"""
        pass


class IUnitOfWork(ABC):
    """
    One transaction scope with the repositories bound to it

    Usage:
        async with uow_factory() as uow:
            job = await uow.jobs.get_by_id(job_id)
            ...
    Leaving the block normally commits; an exception rolls everything back.
    """

    applications: IApplicationRepository
    jobs: IJobRepository
    skills: ISkillDirectory
    notifications: INotificationDispatcher

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
