"""
Job Repository Implementation
Reads job postings and maintains their application aggregates with atomic SQL
"""
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobmatch.application.repositories.interfaces import IJobRepository
from jobmatch.core.exceptions import JobNotFoundException, RepositoryException
from jobmatch.core.logging_config import logger
from jobmatch.domain.entities import Job
from jobmatch.domain.enums import JobStatus
from jobmatch.infrastructure.persistence.models.job import JobModel, JobApplicationLinkModel


class SQLAlchemyJobRepository(IJobRepository):
    """SQLAlchemy implementation of job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID; the application list is left empty"""
        return await self._get(job_id, with_applications=False)

    async def get_with_applications(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID, including the ordered application list"""
        return await self._get(job_id, with_applications=True)

    async def _get(self, job_id: UUID, with_applications: bool) -> Optional[Job]:
        query = select(JobModel).where(JobModel.id == job_id)
        if with_applications:
            query = query.options(selectinload(JobModel.application_links))
        try:
            result = await self.session.execute(query.execution_options(populate_existing=True))
            model = result.scalar_one_or_none()

            if model:
                return self._to_entity(model, with_applications)
            return None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get job by ID {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}") from e

    async def increment_application_counter(self, job_id: UUID, application_id: UUID) -> None:
        """
        Bump application_count in SQL and append a link row

        The counter is computed by the database (application_count + 1), so
        concurrent submissions to the same job never lose an increment.
        """
        try:
            result = await self.session.execute(
                update(JobModel)
                .where(JobModel.id == job_id)
                .values(
                    application_count=JobModel.application_count + 1,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise JobNotFoundException(job_id)

            self.session.add(JobApplicationLinkModel(
                job_id=job_id,
                application_id=application_id,
                created_at=datetime.now(timezone.utc),
            ))
            await self.session.flush()

        except SQLAlchemyError as e:
            logger.error(f"Failed to update application aggregates for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to update job aggregates: {str(e)}") from e

    def _to_entity(self, model: JobModel, with_applications: bool = False) -> Job:
        return Job(
            id=model.id,
            title=model.title,
            company_id=model.company_id,
            posted_by=model.posted_by,
            status=JobStatus(model.status),
            required_skills=frozenset(model.required_skills or []),
            preferred_skills=frozenset(model.preferred_skills or []),
            application_count=model.application_count,
            applications=(
                tuple(link.application_id for link in model.application_links) if with_applications else ()
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
