"""
ApplicationTrackingService Implementation
Retrieves and filters job applications for candidates and employers
"""
from typing import Callable, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from jobmatch.application.schemas import parse_page, parse_status, parse_uuid
from jobmatch.application.services.application_tracking import IApplicationTrackingService
from jobmatch.core.database import get_session_factory
from jobmatch.core.exceptions import ApplicationNotFoundException, JobNotFoundException
from jobmatch.core.logging_config import logger
from jobmatch.domain.entities import Application
from jobmatch.domain.enums import ApplicationStatus
from jobmatch.infrastructure.persistence.repositories import (
    SQLAlchemyApplicationRepository,
    SQLAlchemyJobRepository,
)


class ApplicationTrackingService(IApplicationTrackingService):
    """Application tracking service for querying applications"""

    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        """
        Initialize application tracking service

        Args:
            session_factory: Session factory, defaults to the process-wide one
        """
        self._session_factory: Callable[[], AsyncSession] = session_factory or get_session_factory()

    async def get_application(self, application_id: Union[UUID, str]) -> Application:
        application_id = parse_uuid(application_id, "application_id")
        async with self._session_factory() as session:
            application = await SQLAlchemyApplicationRepository(session).get_by_id(application_id)
        if application is None:
            raise ApplicationNotFoundException(application_id)
        return application

    async def get_applications_for_job(
        self,
        job_id: Union[UUID, str],
        status: Optional[Union[ApplicationStatus, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Application]:
        """
        Get all applications for a job, optionally filtered by status

        Args:
            job_id: Job ID
            status: Optional application status filter
            limit: Page size, clamped to MAX_PAGE_SIZE
            offset: Pagination offset

        Returns:
            List of Application entities
        """
        job_id = parse_uuid(job_id, "job_id")
        status = parse_status(status) if status is not None else None
        limit, offset = parse_page(limit, offset)

        logger.info(f"Retrieving applications for job {job_id}, status filter: {status}")
        async with self._session_factory() as session:
            if await SQLAlchemyJobRepository(session).get_by_id(job_id) is None:
                raise JobNotFoundException(job_id)
            applications = await SQLAlchemyApplicationRepository(session).find_by_job(
                job_id, status=status, limit=limit, offset=offset
            )

        logger.info(f"Found {len(applications)} applications for job {job_id}")
        return applications

    async def get_applicant_applications(
        self,
        applicant_id: Union[UUID, str],
        status: Optional[Union[ApplicationStatus, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Application]:
        applicant_id = parse_uuid(applicant_id, "applicant_id")
        status = parse_status(status) if status is not None else None
        limit, offset = parse_page(limit, offset)

        async with self._session_factory() as session:
            applications = await SQLAlchemyApplicationRepository(session).find_by_applicant(
                applicant_id, status=status, limit=limit, offset=offset
            )

        logger.info(f"Found {len(applications)} applications for applicant {applicant_id}")
        return applications

    async def get_company_application_stats(self, company_id: Union[UUID, str]) -> Dict[str, int]:
        """
        Get application statistics for a company

        Args:
            company_id: Company ID

        Returns:
            Dict with 'total' plus counts by status
        """
        company_id = parse_uuid(company_id, "company_id")
        logger.info(f"Calculating application stats for company {company_id}")

        async with self._session_factory() as session:
            counts = await SQLAlchemyApplicationRepository(session).count_by_status_for_company(company_id)

        stats = self._summarize(counts)
        logger.info(f"Application stats for company {company_id}: {stats}")
        return stats

    async def get_employer_application_stats(self, employer_id: Union[UUID, str]) -> Dict[str, int]:
        """Application statistics over every job the employer posted"""
        employer_id = parse_uuid(employer_id, "employer_id")

        async with self._session_factory() as session:
            counts = await SQLAlchemyApplicationRepository(session).count_by_status_for_employer(employer_id)

        stats = self._summarize(counts)
        logger.info(f"Application stats for employer {employer_id}: {stats}")
        return stats

    def _summarize(self, counts: Dict[ApplicationStatus, int]) -> Dict[str, int]:
        stats = {"total": sum(counts.values())}
        for status in ApplicationStatus:
            stats[status.value] = counts.get(status, 0)
        return stats

