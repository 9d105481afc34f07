"""
ApplicationLifecycleService Implementation
Transactional coordinator for submitting, reviewing and withdrawing applications
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AbstractSet, AsyncIterator, Callable, Hashable, Optional, Union
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError

from jobmatch.application.repositories.interfaces import IUnitOfWork
from jobmatch.application.schemas import (
    ApplicationSubmission,
    InterviewRequest,
    NoteRequest,
    parse_payload,
    parse_status,
    parse_uuid,
)
from jobmatch.application.services.application_lifecycle import IApplicationLifecycleService
from jobmatch.core.exceptions import (
    AlreadyTerminalException,
    ApplicationNotFoundException,
    DependencyException,
    DomainException,
    DuplicateApplicationException,
    InvalidTransitionException,
    JobInactiveException,
    JobNotFoundException,
    RepositoryException,
)
from jobmatch.core.logging_config import logger
from jobmatch.domain.entities import Application, ApplicationNote, Job
from jobmatch.domain.enums import ApplicationStatus, NotificationKind, RelatedType
from jobmatch.domain.transitions import (
    ACTIVE_STATUSES,
    allowed_sources,
    can_transition,
    can_withdraw,
    is_terminal,
)
from jobmatch.domain.value_objects import compute_match_score
from jobmatch.infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork

INTERVIEW_SCHEDULABLE = frozenset({ApplicationStatus.REVIEWING, ApplicationStatus.INTERVIEWED})


class ApplicationLifecycleService(IApplicationLifecycleService):
    """
    Coordinates every multi-aggregate application use-case

    Each public coroutine runs inside exactly one unit of work: the
    application row, the job counters and the notification it emits commit
    together or not at all. This class is the only place that fires
    application notifications.
    """

    def __init__(self, unit_of_work_factory: Optional[Callable[[], IUnitOfWork]] = None):
        """
        Initialize application lifecycle service

        Args:
            unit_of_work_factory: Builds a fresh unit of work per use-case
        """
        self._uow_factory = unit_of_work_factory or SQLAlchemyUnitOfWork

    @asynccontextmanager
    async def _transaction(self, use_case: str) -> AsyncIterator[IUnitOfWork]:
        try:
            async with self._uow_factory() as uow:
                yield uow
        except DependencyException as e:
            logger.error(f"{use_case} aborted and rolled back: {e}")
            raise
        except DomainException as e:
            logger.warning(f"{use_case} rejected: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"{use_case} aborted by database error: {e}")
            raise RepositoryException(f"{use_case} failed: {str(e)}") from e

    async def submit_application(
        self,
        job_id: Union[UUID, str],
        applicant_id: Union[UUID, str],
        payload: Union[ApplicationSubmission, dict]
    ) -> Application:
        job_id = parse_uuid(job_id, "job_id")
        applicant_id = parse_uuid(applicant_id, "applicant_id")
        submission = parse_payload(ApplicationSubmission, payload)

        async with self._transaction("submit_application") as uow:
            job = await uow.jobs.get_by_id(job_id)
            if job is None:
                raise JobNotFoundException(job_id)
            if not job.is_accepting_applications():
                raise JobInactiveException(job_id, job.status.value)

            # Fast path only; the unique constraint settles races
            if await uow.applications.exists_for_job(job_id, applicant_id):
                raise DuplicateApplicationException(job_id, applicant_id)

            candidate_skills = await uow.skills.get_candidate_skills(applicant_id)
            match_score = compute_match_score(job.required_skills, job.preferred_skills, candidate_skills)

            now = datetime.now(timezone.utc)
            application = Application(
                id=uuid4(),
                job_id=job.id,
                applicant_id=applicant_id,
                company_id=job.company_id,
                status=ApplicationStatus.PENDING,
                resume_url=submission.resume_url,
                cover_letter=submission.cover_letter,
                answers=submission.to_answers(),
                match_score=match_score,
                created_at=now,
                updated_at=now,
            )
            await uow.applications.create(application)
            await uow.jobs.increment_application_counter(job.id, application.id)

            await uow.notifications.create_notification(
                recipient_id=job.posted_by,
                kind=NotificationKind.NEW_APPLICATION,
                message=f"New application received for {job.title}",
                related_id=application.id,
                related_type=RelatedType.APPLICATION,
            )
            created = await self._load(uow, application.id)

        logger.info(
            f"Application {created.id} submitted by {applicant_id} for job {job_id} "
            f"(match score {created.match_score})"
        )
        return created

    async def update_application_status(
        self,
        application_id: Union[UUID, str],
        new_status: Union[ApplicationStatus, str],
        note: Optional[str] = None,
        actor_id: Optional[UUID] = None
    ) -> Application:
        application_id = parse_uuid(application_id, "application_id")
        requested = parse_status(new_status, "new_status")
        actor_id = self._parse_actor(actor_id)

        async with self._transaction("update_application_status") as uow:
            application = await self._load(uow, application_id)
            current = application.status

            if not can_transition(current, requested):
                raise InvalidTransitionException(current.value, requested.value, self._rejection_reason(current, requested))

            updated = await uow.applications.transition_status(
                application_id, allowed_sources(requested), requested
            )
            if not updated:
                fresh = await self._load(uow, application_id)
                raise InvalidTransitionException(
                    fresh.status.value, requested.value, "status was changed by a concurrent update"
                )

            if note and note.strip():
                await uow.applications.add_note(application_id, ApplicationNote(
                    content=f"Status updated to {requested.value}: {note.strip()}",
                    author_id=actor_id,
                ))

            job = await uow.jobs.get_by_id(application.job_id)
            job_title = job.title if job else "a job"
            await uow.notifications.create_notification(
                recipient_id=application.applicant_id,
                kind=NotificationKind.APPLICATION_STATUS_UPDATE,
                message=f"Your application for {job_title} has been updated to {requested.value}",
                related_id=application_id,
                related_type=RelatedType.APPLICATION,
            )
            result = await self._load(uow, application_id)

        logger.info(f"Application {application_id} moved from {current.value} to {requested.value}")
        return result

    async def withdraw_application(
        self,
        application_id: Union[UUID, str],
        reason: Optional[str] = None,
        actor_id: Optional[UUID] = None
    ) -> Application:
        application_id = parse_uuid(application_id, "application_id")
        actor_id = self._parse_actor(actor_id)
        reason = reason.strip() if reason and reason.strip() else None

        async with self._transaction("withdraw_application") as uow:
            application = await self._load(uow, application_id)
            if not can_withdraw(application.status):
                raise AlreadyTerminalException(application_id, application.status.value)

            updated = await uow.applications.transition_status(
                application_id, ACTIVE_STATUSES, ApplicationStatus.WITHDRAWN, withdraw_reason=reason
            )
            if not updated:
                fresh = await self._load(uow, application_id)
                raise AlreadyTerminalException(application_id, fresh.status.value)

            if reason:
                await uow.applications.add_note(application_id, ApplicationNote(
                    content=f"Application withdrawn: {reason}",
                    author_id=actor_id or application.applicant_id,
                ))

            job = await self._load_job(uow, application.job_id)
            await uow.notifications.create_notification(
                recipient_id=job.posted_by,
                kind=NotificationKind.APPLICATION_WITHDRAWN,
                message=f"A candidate has withdrawn their application for {job.title}",
                related_id=application_id,
                related_type=RelatedType.APPLICATION,
            )
            result = await self._load(uow, application_id)

        logger.info(f"Application {application_id} withdrawn (was {application.status.value})")
        return result

    async def schedule_interview(
        self,
        application_id: Union[UUID, str],
        interview: Union[InterviewRequest, dict],
        actor_id: Optional[UUID] = None
    ) -> Application:
        application_id = parse_uuid(application_id, "application_id")
        request = parse_payload(InterviewRequest, interview)
        actor_id = self._parse_actor(actor_id)
        target = ApplicationStatus.INTERVIEWED

        async with self._transaction("schedule_interview") as uow:
            application = await self._load(uow, application_id)
            if application.status not in INTERVIEW_SCHEDULABLE:
                raise InvalidTransitionException(
                    application.status.value, target.value,
                    "interviews can only be scheduled for applications under review"
                )

            # Reviewing moves to interviewed, interviewed stays put
            updated = await uow.applications.transition_status(application_id, INTERVIEW_SCHEDULABLE, target)
            if not updated:
                fresh = await self._load(uow, application_id)
                raise InvalidTransitionException(
                    fresh.status.value, target.value, "status was changed by a concurrent update"
                )

            record = request.to_interview()
            await uow.applications.add_interview(application_id, record)
            await uow.applications.add_note(application_id, ApplicationNote(
                content=(
                    f"Interview ({record.interview_type.value}) scheduled for "
                    f"{record.scheduled_at.isoformat()}"
                ),
                author_id=actor_id,
            ))

            job = await uow.jobs.get_by_id(application.job_id)
            job_title = job.title if job else "a job"
            await uow.notifications.create_notification(
                recipient_id=application.applicant_id,
                kind=NotificationKind.INTERVIEW_SCHEDULED,
                message=f"Interview scheduled for your application to {job_title}",
                related_id=application_id,
                related_type=RelatedType.APPLICATION,
            )
            result = await self._load(uow, application_id)

        logger.info(f"Interview scheduled for application {application_id} at {record.scheduled_at.isoformat()}")
        return result

    async def add_note(
        self,
        application_id: Union[UUID, str],
        content: str,
        author_id: Optional[UUID] = None
    ) -> Application:
        application_id = parse_uuid(application_id, "application_id")
        request = parse_payload(NoteRequest, {"content": content})
        author_id = self._parse_actor(author_id)

        async with self._transaction("add_note") as uow:
            await self._load(uow, application_id)
            await uow.applications.add_note(application_id, ApplicationNote(
                content=request.content,
                author_id=author_id,
            ))
            result = await self._load(uow, application_id)

        logger.debug(f"Note added to application {application_id}")
        return result

    async def recompute_match_score(self, application_id: Union[UUID, str]) -> Application:
        application_id = parse_uuid(application_id, "application_id")

        async with self._transaction("recompute_match_score") as uow:
            application = await self._load(uow, application_id)
            job = await self._load_job(uow, application.job_id)
            candidate_skills = await uow.skills.get_candidate_skills(application.applicant_id)

            score = compute_match_score(job.required_skills, job.preferred_skills, candidate_skills)
            if score != application.match_score:
                await uow.applications.update_match_score(application_id, score)
            result = await self._load(uow, application_id)

        logger.info(f"Match score for application {application_id}: {application.match_score} -> {score}")
        return result

    def compute_match_score(
        self,
        required_skills: AbstractSet[Hashable],
        preferred_skills: AbstractSet[Hashable],
        candidate_skills: AbstractSet[Hashable]
    ) -> int:
        return compute_match_score(required_skills, preferred_skills, candidate_skills)

    async def _load(self, uow: IUnitOfWork, application_id: UUID) -> Application:
        application = await uow.applications.get_by_id(application_id)
        if application is None:
            raise ApplicationNotFoundException(application_id)
        return application

    async def _load_job(self, uow: IUnitOfWork, job_id: UUID) -> Job:
        job = await uow.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException(job_id)
        return job

    def _parse_actor(self, actor_id) -> Optional[UUID]:
        return parse_uuid(actor_id, "actor_id") if actor_id is not None else None

    def _rejection_reason(self, current: ApplicationStatus, requested: ApplicationStatus) -> str:
        if is_terminal(current):
            return f"'{current.value}' is a terminal status"
        if requested == ApplicationStatus.WITHDRAWN:
            return "use withdraw_application to withdraw"
        return "not in the transition table"
