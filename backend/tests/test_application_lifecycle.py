"""
Tests for the application lifecycle use-cases
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from jobmatch.application.services.notification import INotificationDispatcher
from jobmatch.core.exceptions import (
    AlreadyTerminalException,
    ApplicationNotFoundException,
    DuplicateApplicationException,
    InvalidTransitionException,
    JobInactiveException,
    JobNotFoundException,
    NotificationDispatchException,
    RepositoryException,
    ValidationException,
)
from jobmatch.domain.entities import Application, ApplicationAnswer
from jobmatch.domain.enums import (
    ApplicationStatus,
    InterviewType,
    JobStatus,
    NotificationKind,
    RelatedType,
)
from jobmatch.domain.transitions import TRANSITIONS
from jobmatch.infrastructure.persistence.models import (
    ApplicationModel,
    CandidateSkillModel,
    NotificationModel,
)
from jobmatch.infrastructure.persistence.repositories import (
    SQLAlchemyApplicationRepository,
    SQLAlchemyJobRepository,
)
from jobmatch.infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork
from jobmatch.infrastructure.services.application_lifecycle_service import ApplicationLifecycleService


RESUME = {"resume_url": "https://cdn.example.com/resumes/candidate.pdf"}


class FailingDispatcher(INotificationDispatcher):
    """Dispatcher whose backing channel is down"""

    def __init__(self, session=None):
        pass

    async def create_notification(self, recipient_id, kind, message, related_id=None, related_type=None):
        raise NotificationDispatchException("notification channel unavailable")


class FakeUnitOfWork:
    """In-memory unit of work with mocked repositories"""

    def __init__(self):
        self.applications = AsyncMock()
        self.jobs = AsyncMock()
        self.skills = AsyncMock()
        self.notifications = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.committed = True
        else:
            self.rolled_back = True


def make_entity(status: ApplicationStatus) -> Application:
    return Application(
        id=uuid4(),
        job_id=uuid4(),
        applicant_id=uuid4(),
        company_id=uuid4(),
        status=status,
        resume_url=RESUME["resume_url"],
    )


class TestSubmitApplication:
    """Test submit_application"""

    @pytest.mark.asyncio
    async def test_submit_creates_pending_application(
        self, lifecycle_service, notification_service, session_factory, make_job, make_candidate, application_count
    ):
        job = await make_job(required=["python", "sql", "go"], preferred=["docker", "aws"])
        applicant_id = await make_candidate(["python", "sql"])

        application = await lifecycle_service.submit_application(job.id, applicant_id, {
            **RESUME,
            "cover_letter": "I would love to join.",
            "answers": [{"question": "Years of Python?", "answer": "6"}],
        })

        assert application.status == ApplicationStatus.PENDING
        assert application.job_id == job.id
        assert application.applicant_id == applicant_id
        assert application.company_id == job.company_id
        assert application.match_score == 47
        assert application.cover_letter == "I would love to join."
        assert application.answers == (ApplicationAnswer("Years of Python?", "6"),)
        assert application.notes == ()
        assert not application.is_withdrawn

        assert await application_count(job.id) == 1
        async with session_factory() as session:
            stored_job = await SQLAlchemyJobRepository(session).get_with_applications(job.id)
        assert stored_job.applications == (application.id,)

        notifications = await notification_service.get_user_notifications(job.posted_by)
        assert len(notifications) == 1
        assert notifications[0].kind == NotificationKind.NEW_APPLICATION
        assert notifications[0].message == "New application received for Backend Engineer"
        assert notifications[0].related_id == application.id
        assert notifications[0].related_type == RelatedType.APPLICATION
        assert not notifications[0].is_read

    @pytest.mark.asyncio
    async def test_plain_job_lookup_skips_application_list(
        self, lifecycle_service, session_factory, make_job, make_candidate
    ):
        job = await make_job()
        submitted = [
            await lifecycle_service.submit_application(job.id, await make_candidate(), RESUME)
            for _ in range(3)
        ]

        async with session_factory() as session:
            repository = SQLAlchemyJobRepository(session)
            plain = await repository.get_by_id(job.id)
            full = await repository.get_with_applications(job.id)
            missing = await repository.get_with_applications(uuid4())

        assert plain.application_count == 3
        assert plain.applications == ()
        assert full.applications == tuple(a.id for a in submitted)
        assert missing is None

    @pytest.mark.asyncio
    async def test_submit_accepts_string_ids(self, lifecycle_service, make_job, make_candidate):
        job = await make_job()
        applicant_id = await make_candidate()

        application = await lifecycle_service.submit_application(str(job.id), str(applicant_id), RESUME)

        assert application.job_id == job.id
        assert application.match_score == 100

    @pytest.mark.asyncio
    async def test_second_submit_is_duplicate(
        self, lifecycle_service, make_job, make_candidate, application_count, count_rows
    ):
        job = await make_job()
        applicant_id = await make_candidate()
        await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        with pytest.raises(DuplicateApplicationException) as exc_info:
            await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        assert exc_info.value.job_id == job.id
        assert exc_info.value.applicant_id == applicant_id
        assert await application_count(job.id) == 1
        assert await count_rows(ApplicationModel) == 1
        assert await count_rows(NotificationModel) == 1

    @pytest.mark.asyncio
    async def test_unique_constraint_is_translated_to_duplicate(
        self, lifecycle_service, make_job, make_candidate, application_count, count_rows
    ):
        """Skipping the pre-check still cannot create a second application"""
        job = await make_job()
        applicant_id = await make_candidate()
        await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        with patch.object(SQLAlchemyApplicationRepository, "exists_for_job", new=AsyncMock(return_value=False)):
            with pytest.raises(DuplicateApplicationException):
                await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        assert await application_count(job.id) == 1
        assert await count_rows(ApplicationModel) == 1
        assert await count_rows(NotificationModel) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [s for s in JobStatus if s != JobStatus.ACTIVE])
    async def test_inactive_job_rejected_without_side_effects(
        self, lifecycle_service, make_job, make_candidate, application_count, count_rows, status
    ):
        job = await make_job(status=status)
        applicant_id = await make_candidate()

        with pytest.raises(JobInactiveException) as exc_info:
            await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        assert exc_info.value.status == status.value
        assert await application_count(job.id) == 0
        assert await count_rows(ApplicationModel) == 0
        assert await count_rows(NotificationModel) == 0

    @pytest.mark.asyncio
    async def test_unknown_job(self, lifecycle_service, make_candidate):
        applicant_id = await make_candidate()

        with pytest.raises(JobNotFoundException):
            await lifecycle_service.submit_application(uuid4(), applicant_id, RESUME)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("job_id,payload,field", [
        ("not-a-uuid", RESUME, "job_id"),
        (uuid4(), {}, "resume_url"),
        (uuid4(), {"resume_url": "   "}, "resume_url"),
        (uuid4(), {**RESUME, "answers": [{"answer": "yes"}]}, "answers.0.question"),
    ])
    async def test_malformed_input_rejected_before_store_access(self, job_id, payload, field):
        uow_factory = Mock()
        service = ApplicationLifecycleService(uow_factory)

        with pytest.raises(ValidationException) as exc_info:
            await service.submit_application(job_id, uuid4(), payload)

        assert exc_info.value.field == field
        uow_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatcher_failure_rolls_back_everything(
        self, session_factory, make_job, make_candidate, application_count, count_rows
    ):
        service = ApplicationLifecycleService(
            lambda: SQLAlchemyUnitOfWork(session_factory, dispatcher_factory=FailingDispatcher)
        )
        job = await make_job()
        applicant_id = await make_candidate()

        with pytest.raises(NotificationDispatchException):
            await service.submit_application(job.id, applicant_id, RESUME)

        assert await application_count(job.id) == 0
        assert await count_rows(ApplicationModel) == 0
        assert await count_rows(NotificationModel) == 0

        async with session_factory() as session:
            stored_job = await SQLAlchemyJobRepository(session).get_with_applications(job.id)
        assert stored_job.applications == ()

    @pytest.mark.asyncio
    async def test_database_error_becomes_repository_exception(self):
        uow = FakeUnitOfWork()
        uow.jobs.get_by_id.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        service = ApplicationLifecycleService(lambda: uow)

        with pytest.raises(RepositoryException):
            await service.submit_application(uuid4(), uuid4(), RESUME)

        assert uow.rolled_back


class TestUpdateApplicationStatus:
    """Test update_application_status"""

    @pytest.mark.asyncio
    async def test_full_hiring_path_notifies_applicant(
        self, lifecycle_service, notification_service, make_job, make_candidate
    ):
        job = await make_job(title="Data Engineer")
        applicant_id = await make_candidate()
        application = await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        for status in ["reviewing", "interviewed", "offered", "hired"]:
            application = await lifecycle_service.update_application_status(application.id, status)
            assert application.status == ApplicationStatus(status)

        assert application.is_terminal()
        notifications = await notification_service.get_user_notifications(applicant_id)
        assert len(notifications) == 4
        assert {n.kind for n in notifications} == {NotificationKind.APPLICATION_STATUS_UPDATE}
        assert "Your application for Data Engineer has been updated to hired" in {n.message for n in notifications}

    @pytest.mark.asyncio
    async def test_note_is_appended(self, lifecycle_service, make_job, make_candidate):
        job = await make_job()
        application = await lifecycle_service.submit_application(job.id, await make_candidate(), RESUME)
        reviewer_id = uuid4()

        updated = await lifecycle_service.update_application_status(
            application.id, ApplicationStatus.REVIEWING, note="Strong portfolio", actor_id=reviewer_id
        )

        assert len(updated.notes) == 1
        assert updated.notes[0].content == "Status updated to reviewing: Strong portfolio"
        assert updated.notes[0].author_id == reviewer_id

    @pytest.mark.asyncio
    async def test_every_missing_transition_is_rejected_and_changes_nothing(
        self, lifecycle_service, tracking_service, make_job, make_application, count_rows
    ):
        job = await make_job()

        for current in ApplicationStatus:
            for requested in ApplicationStatus:
                if requested in TRANSITIONS[current]:
                    continue
                application_id = await make_application(job, current)
                before = await tracking_service.get_application(application_id)

                with pytest.raises(InvalidTransitionException) as exc_info:
                    await lifecycle_service.update_application_status(application_id, requested)

                assert exc_info.value.current == current.value
                assert exc_info.value.requested == requested.value
                after = await tracking_service.get_application(application_id)
                assert after == before

        assert await count_rows(NotificationModel) == 0

    @pytest.mark.asyncio
    async def test_withdrawn_is_not_reachable_by_status_change(self, lifecycle_service, make_job, make_application):
        job = await make_job()
        application_id = await make_application(job, ApplicationStatus.REVIEWING)

        with pytest.raises(InvalidTransitionException, match="withdraw_application"):
            await lifecycle_service.update_application_status(application_id, "withdrawn")

    @pytest.mark.asyncio
    async def test_unknown_status(self, lifecycle_service, make_job, make_application):
        job = await make_job()
        application_id = await make_application(job)

        with pytest.raises(ValidationException) as exc_info:
            await lifecycle_service.update_application_status(application_id, "archived")

        assert exc_info.value.field == "new_status"

    @pytest.mark.asyncio
    async def test_unknown_application(self, lifecycle_service):
        with pytest.raises(ApplicationNotFoundException):
            await lifecycle_service.update_application_status(uuid4(), "reviewing")

    @pytest.mark.asyncio
    async def test_lost_compare_and_set_reports_fresh_status(self):
        """A row changed between read and update fails with the status actually stored"""
        pending = make_entity(ApplicationStatus.PENDING)
        uow = FakeUnitOfWork()
        uow.applications.get_by_id.side_effect = [pending, make_entity(ApplicationStatus.REJECTED)]
        uow.applications.transition_status.return_value = False
        service = ApplicationLifecycleService(lambda: uow)

        with pytest.raises(InvalidTransitionException) as exc_info:
            await service.update_application_status(pending.id, ApplicationStatus.REVIEWING)

        assert exc_info.value.current == "rejected"
        uow.notifications.create_notification.assert_not_awaited()
        assert uow.rolled_back
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_dispatcher_failure_keeps_old_status(self, session_factory, tracking_service, make_job, make_application):
        service = ApplicationLifecycleService(
            lambda: SQLAlchemyUnitOfWork(session_factory, dispatcher_factory=FailingDispatcher)
        )
        job = await make_job()
        application_id = await make_application(job)

        with pytest.raises(NotificationDispatchException):
            await service.update_application_status(application_id, "reviewing", note="Looks good")

        stored = await tracking_service.get_application(application_id)
        assert stored.status == ApplicationStatus.PENDING
        assert stored.notes == ()


class TestWithdrawApplication:
    """Test withdraw_application"""

    @pytest.mark.asyncio
    async def test_withdraw_with_reason(self, lifecycle_service, notification_service, make_job, make_candidate):
        job = await make_job(title="SRE")
        applicant_id = await make_candidate()
        application = await lifecycle_service.submit_application(job.id, applicant_id, RESUME)

        withdrawn = await lifecycle_service.withdraw_application(application.id, reason="  Accepted another offer ")

        assert withdrawn.status == ApplicationStatus.WITHDRAWN
        assert withdrawn.is_withdrawn
        assert withdrawn.withdraw_reason == "Accepted another offer"
        assert withdrawn.notes[-1].content == "Application withdrawn: Accepted another offer"
        assert withdrawn.notes[-1].author_id == applicant_id

        owner_inbox = await notification_service.get_user_notifications(
            job.posted_by, kind=NotificationKind.APPLICATION_WITHDRAWN
        )
        assert len(owner_inbox) == 1
        assert owner_inbox[0].message == "A candidate has withdrawn their application for SRE"
        assert owner_inbox[0].related_id == application.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [
        ApplicationStatus.PENDING,
        ApplicationStatus.REVIEWING,
        ApplicationStatus.INTERVIEWED,
        ApplicationStatus.OFFERED,
    ])
    async def test_withdraw_from_any_active_status(self, lifecycle_service, make_job, make_application, status):
        job = await make_job()
        application_id = await make_application(job, status)

        withdrawn = await lifecycle_service.withdraw_application(application_id)

        assert withdrawn.status == ApplicationStatus.WITHDRAWN
        assert withdrawn.withdraw_reason is None
        assert withdrawn.notes == ()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    ])
    async def test_terminal_application_cannot_be_withdrawn(
        self, lifecycle_service, tracking_service, make_job, make_application, count_rows, status
    ):
        job = await make_job()
        application_id = await make_application(job, status)
        before = await tracking_service.get_application(application_id)

        with pytest.raises(AlreadyTerminalException) as exc_info:
            await lifecycle_service.withdraw_application(application_id, reason="Changed my mind")

        assert exc_info.value.status == status.value
        assert await tracking_service.get_application(application_id) == before
        assert await count_rows(NotificationModel) == 0

    @pytest.mark.asyncio
    async def test_withdrawn_application_is_frozen(self, lifecycle_service, make_job, make_application):
        job = await make_job()
        application_id = await make_application(job)
        await lifecycle_service.withdraw_application(application_id)

        with pytest.raises(InvalidTransitionException):
            await lifecycle_service.update_application_status(application_id, "reviewing")
        with pytest.raises(AlreadyTerminalException):
            await lifecycle_service.withdraw_application(application_id)

    @pytest.mark.asyncio
    async def test_unknown_application(self, lifecycle_service):
        with pytest.raises(ApplicationNotFoundException):
            await lifecycle_service.withdraw_application(uuid4())


class TestScheduleInterview:
    """Test schedule_interview"""

    INTERVIEW = {
        "scheduled_at": datetime(2026, 11, 3, 15, 0, tzinfo=timezone.utc),
        "interview_type": "video",
        "location": "https://meet.example.com/abc",
    }

    @pytest.mark.asyncio
    async def test_schedule_moves_reviewing_to_interviewed(
        self, lifecycle_service, notification_service, make_job, make_application, tracking_service
    ):
        job = await make_job(title="QA Lead")
        application_id = await make_application(job, ApplicationStatus.REVIEWING)
        interviewer_id = uuid4()

        updated = await lifecycle_service.schedule_interview(
            application_id, {**self.INTERVIEW, "interviewer_ids": [str(interviewer_id)]}
        )

        assert updated.status == ApplicationStatus.INTERVIEWED
        assert len(updated.interviews) == 1
        interview = updated.interviews[0]
        assert interview.interview_type == InterviewType.VIDEO
        assert interview.interviewer_ids == (interviewer_id,)
        assert interview.scheduled_at.replace(tzinfo=None) == datetime(2026, 11, 3, 15, 0)
        assert updated.notes[-1].content.startswith("Interview (video) scheduled for 2026-11-03T15:00:00")

        inbox = await notification_service.get_user_notifications(updated.applicant_id)
        assert [n.kind for n in inbox] == [NotificationKind.INTERVIEW_SCHEDULED]
        assert inbox[0].message == "Interview scheduled for your application to QA Lead"

    @pytest.mark.asyncio
    async def test_second_interview_keeps_status(self, lifecycle_service, make_job, make_application):
        job = await make_job()
        application_id = await make_application(job, ApplicationStatus.REVIEWING)

        await lifecycle_service.schedule_interview(application_id, self.INTERVIEW)
        updated = await lifecycle_service.schedule_interview(
            application_id, {**self.INTERVIEW, "interview_type": "in-person", "location": "HQ"}
        )

        assert updated.status == ApplicationStatus.INTERVIEWED
        assert [i.interview_type for i in updated.interviews] == [InterviewType.VIDEO, InterviewType.IN_PERSON]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [ApplicationStatus.PENDING, ApplicationStatus.OFFERED, ApplicationStatus.HIRED])
    async def test_schedule_requires_review(self, lifecycle_service, make_job, make_application, status):
        job = await make_job()
        application_id = await make_application(job, status)

        with pytest.raises(InvalidTransitionException):
            await lifecycle_service.schedule_interview(application_id, self.INTERVIEW)

    @pytest.mark.asyncio
    async def test_invalid_interview_type(self, lifecycle_service):
        with pytest.raises(ValidationException) as exc_info:
            await lifecycle_service.schedule_interview(uuid4(), {**self.INTERVIEW, "interview_type": "carrier-pigeon"})

        assert exc_info.value.field == "interview_type"


class TestNotesAndScores:
    """Test add_note and recompute_match_score"""

    @pytest.mark.asyncio
    async def test_add_note_keeps_status(self, lifecycle_service, make_job, make_application, count_rows):
        job = await make_job()
        application_id = await make_application(job, ApplicationStatus.REVIEWING)
        author_id = uuid4()

        updated = await lifecycle_service.add_note(application_id, "Call back next week", author_id=author_id)

        assert updated.status == ApplicationStatus.REVIEWING
        assert updated.notes[0].content == "Call back next week"
        assert updated.notes[0].author_id == author_id
        assert await count_rows(NotificationModel) == 0

    @pytest.mark.asyncio
    async def test_blank_note_rejected(self, lifecycle_service):
        with pytest.raises(ValidationException) as exc_info:
            await lifecycle_service.add_note(uuid4(), "   ")

        assert exc_info.value.field == "content"

    @pytest.mark.asyncio
    async def test_recompute_picks_up_new_skills(self, lifecycle_service, session_factory, make_job, make_candidate):
        job = await make_job(required=["python", "sql"])
        applicant_id = await make_candidate(["python"])
        application = await lifecycle_service.submit_application(job.id, applicant_id, RESUME)
        assert application.match_score == 65

        async with session_factory() as session:
            session.add(CandidateSkillModel(user_id=applicant_id, skill_id="sql"))
            await session.commit()

        updated = await lifecycle_service.recompute_match_score(application.id)

        assert updated.match_score == 100
        assert updated.status == ApplicationStatus.PENDING

    def test_compute_match_score_is_pure(self):
        service = ApplicationLifecycleService(Mock())
        assert service.compute_match_score({"A", "B", "C"}, {"D", "E"}, {"A", "B"}) == 47
