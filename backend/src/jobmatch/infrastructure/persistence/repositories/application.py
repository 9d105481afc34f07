"""
Application Repository Implementation
SQLAlchemy-based application store owning the (job, applicant) uniqueness invariant
"""
from datetime import datetime, timezone
from typing import AbstractSet, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobmatch.application.repositories.interfaces import IApplicationRepository
from jobmatch.core.exceptions import DuplicateApplicationException, RepositoryException
from jobmatch.core.logging_config import logger
from jobmatch.domain.entities import Application, ApplicationAnswer, ApplicationNote, Interview
from jobmatch.domain.enums import ApplicationStatus, InterviewStatus, InterviewType
from jobmatch.infrastructure.persistence.models.application import (
    ApplicationModel,
    ApplicationNoteModel,
    ApplicationInterviewModel,
    APPLICATION_UNIQUE_CONSTRAINT,
)
from jobmatch.infrastructure.persistence.models.job import JobModel


def is_duplicate_application_error(error: IntegrityError) -> bool:
    """Tell a (job, applicant) unique violation apart from other integrity errors"""
    message = str(error.orig).lower()
    if APPLICATION_UNIQUE_CONSTRAINT in message:
        return True
    # SQLite reports the columns instead of the constraint name
    return "unique" in message and "applications.job_id" in message and "applications.applicant_id" in message


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """SQLAlchemy implementation of application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self):
        return (
            select(ApplicationModel)
            .options(
                selectinload(ApplicationModel.notes),
                selectinload(ApplicationModel.interviews),
            )
            .execution_options(populate_existing=True)
        )

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        try:
            result = await self.session.execute(
                self._select().where(ApplicationModel.id == application_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}") from e

    async def exists_for_job(self, job_id: UUID, applicant_id: UUID) -> bool:
        """Check if applicant already applied to job"""
        try:
            result = await self.session.execute(
                select(ApplicationModel.id).where(
                    ApplicationModel.job_id == job_id,
                    ApplicationModel.applicant_id == applicant_id,
                )
            )
            return result.first() is not None

        except SQLAlchemyError as e:
            logger.error(f"Failed duplicate check for job={job_id}, applicant={applicant_id}: {str(e)}")
            raise RepositoryException(f"Failed duplicate check: {str(e)}") from e

    async def create(self, application: Application) -> Application:
        """Create new application; the unique constraint is the final word on duplicates"""
        self.session.add(self._to_model(application))
        try:
            await self.session.flush()
        except IntegrityError as e:
            if is_duplicate_application_error(e):
                logger.warning(
                    f"Unique constraint rejected application for job={application.job_id}, "
                    f"applicant={application.applicant_id}"
                )
                raise DuplicateApplicationException(application.job_id, application.applicant_id) from e
            logger.error(f"Integrity error creating application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to create application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}") from e

        return application

    async def transition_status(
        self,
        application_id: UUID,
        allowed_from: AbstractSet[ApplicationStatus],
        new_status: ApplicationStatus,
        withdraw_reason: Optional[str] = None,
    ) -> bool:
        """Compare-and-set status change guarded by the stored status"""
        values = {
            "status": new_status.value,
            "updated_at": datetime.now(timezone.utc),
        }
        if new_status == ApplicationStatus.WITHDRAWN:
            values["is_withdrawn"] = True
            values["withdraw_reason"] = withdraw_reason

        stmt = (
            update(ApplicationModel)
            .where(
                ApplicationModel.id == application_id,
                ApplicationModel.status.in_(sorted(s.value for s in allowed_from)),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Failed to update status of application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to update application status: {str(e)}") from e

    async def add_note(self, application_id: UUID, note: ApplicationNote) -> None:
        """Append an audit note"""
        now = datetime.now(timezone.utc)
        self.session.add(ApplicationNoteModel(
            application_id=application_id,
            content=note.content,
            author_id=note.author_id,
            created_at=note.created_at or now,
        ))
        await self._touch(application_id, now)

    async def add_interview(self, application_id: UUID, interview: Interview) -> None:
        """Append an interview record"""
        now = datetime.now(timezone.utc)
        self.session.add(ApplicationInterviewModel(
            application_id=application_id,
            scheduled_at=interview.scheduled_at,
            location=interview.location,
            interviewer_ids=[str(i) for i in interview.interviewer_ids],
            interview_type=interview.interview_type.value,
            status=interview.status.value,
            feedback=interview.feedback,
            created_at=now,
        ))
        await self._touch(application_id, now)

    async def update_match_score(self, application_id: UUID, match_score: int) -> None:
        """Persist a recomputed match score"""
        try:
            await self.session.execute(
                update(ApplicationModel)
                .where(ApplicationModel.id == application_id)
                .values(match_score=match_score, updated_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to update match score of application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to update match score: {str(e)}") from e

    async def find_by_job(
        self,
        job_id: UUID,
        status: Optional[ApplicationStatus] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        """Applications received by a job, newest first"""
        return await self._find(ApplicationModel.job_id == job_id, status, limit, offset)

    async def find_by_applicant(
        self,
        applicant_id: UUID,
        status: Optional[ApplicationStatus] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        """Applications submitted by a candidate, newest first"""
        return await self._find(ApplicationModel.applicant_id == applicant_id, status, limit, offset)

    async def count_by_status_for_company(self, company_id: UUID) -> Dict[ApplicationStatus, int]:
        """Application counts grouped by status for one company"""
        try:
            result = await self.session.execute(
                select(ApplicationModel.status, func.count(ApplicationModel.id))
                .where(ApplicationModel.company_id == company_id)
                .group_by(ApplicationModel.status)
            )
            return {ApplicationStatus(status): count for status, count in result.all()}

        except SQLAlchemyError as e:
            logger.error(f"Failed to count applications for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}") from e

    async def count_by_status_for_employer(self, employer_id: UUID) -> Dict[ApplicationStatus, int]:
        """Application counts grouped by status over the jobs an employer posted"""
        try:
            result = await self.session.execute(
                select(ApplicationModel.status, func.count(ApplicationModel.id))
                .join(JobModel, JobModel.id == ApplicationModel.job_id)
                .where(JobModel.posted_by == employer_id)
                .group_by(ApplicationModel.status)
            )
            return {ApplicationStatus(status): count for status, count in result.all()}

        except SQLAlchemyError as e:
            logger.error(f"Failed to count applications for employer {employer_id}: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}") from e

    async def _find(self, condition, status, limit, offset) -> List[Application]:
        query = self._select().where(condition)
        if status:
            query = query.where(ApplicationModel.status == status.value)
        query = query.order_by(ApplicationModel.created_at.desc()).limit(limit).offset(offset)

        try:
            result = await self.session.execute(query)
            return [self._to_entity(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Failed to find applications: {str(e)}")
            raise RepositoryException(f"Failed to find applications: {str(e)}") from e

    async def _touch(self, application_id: UUID, now: datetime) -> None:
        try:
            await self.session.flush()
            await self.session.execute(
                update(ApplicationModel)
                .where(ApplicationModel.id == application_id)
                .values(updated_at=now)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to append to application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to update application: {str(e)}") from e

    def _to_model(self, entity: Application) -> ApplicationModel:
        return ApplicationModel(
            id=entity.id,
            job_id=entity.job_id,
            applicant_id=entity.applicant_id,
            company_id=entity.company_id,
            status=entity.status.value,
            resume_url=entity.resume_url,
            cover_letter=entity.cover_letter,
            answers=[{"question": a.question, "answer": a.answer} for a in entity.answers],
            match_score=entity.match_score,
            is_withdrawn=entity.is_withdrawn,
            withdraw_reason=entity.withdraw_reason,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            notes=[],
            interviews=[],
        )

    def _to_entity(self, model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            job_id=model.job_id,
            applicant_id=model.applicant_id,
            company_id=model.company_id,
            status=ApplicationStatus(model.status),
            resume_url=model.resume_url,
            cover_letter=model.cover_letter,
            answers=tuple(
                ApplicationAnswer(question=a.get("question", ""), answer=a.get("answer", ""))
                for a in (model.answers or [])
            ),
            notes=tuple(
                ApplicationNote(content=n.content, author_id=n.author_id, created_at=n.created_at)
                for n in model.notes
            ),
            interviews=tuple(
                Interview(
                    scheduled_at=i.scheduled_at,
                    interview_type=InterviewType(i.interview_type),
                    location=i.location,
                    interviewer_ids=tuple(UUID(x) for x in (i.interviewer_ids or [])),
                    status=InterviewStatus(i.status),
                    feedback=i.feedback,
                )
                for i in model.interviews
            ),
            match_score=model.match_score,
            is_withdrawn=model.is_withdrawn,
            withdraw_reason=model.withdraw_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
