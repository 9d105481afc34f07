"""
Shared fixtures: a throwaway SQLite database per test and seed helpers
"""
from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from jobmatch.core.database import create_engine, create_session_factory, init_db
from jobmatch.domain.enums import ApplicationStatus, JobStatus
from jobmatch.infrastructure.persistence.models import (
    ApplicationModel,
    CandidateSkillModel,
    JobModel,
)
from jobmatch.infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork
from jobmatch.infrastructure.services.application_lifecycle_service import ApplicationLifecycleService
from jobmatch.infrastructure.services.application_tracking_service import ApplicationTrackingService
from jobmatch.infrastructure.services.notification_service import NotificationService


RESUME = {"resume_url": "https://cdn.example.com/resumes/candidate.pdf"}


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'jobmatch.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SQLAlchemyUnitOfWork(session_factory)


@pytest.fixture
def lifecycle_service(uow_factory):
    return ApplicationLifecycleService(uow_factory)


@pytest.fixture
def tracking_service(session_factory):
    return ApplicationTrackingService(session_factory)


@pytest.fixture
def notification_service(session_factory):
    return NotificationService(session_factory)


@pytest.fixture
def make_job(session_factory):
    """Insert a job row and return it (detached)"""

    async def _make_job(
        status: JobStatus = JobStatus.ACTIVE,
        required: Iterable[str] = (),
        preferred: Iterable[str] = (),
        title: str = "Backend Engineer",
        company_id: Optional[UUID] = None,
        posted_by: Optional[UUID] = None,
    ) -> JobModel:
        job = JobModel(
            id=uuid4(),
            title=title,
            company_id=company_id or uuid4(),
            posted_by=posted_by or uuid4(),
            status=status.value,
            required_skills=sorted(required),
            preferred_skills=sorted(preferred),
            application_count=0,
        )
        async with session_factory() as session:
            session.add(job)
            await session.commit()
        return job

    return _make_job


@pytest.fixture
def make_candidate(session_factory):
    """Insert a candidate's skills and return the candidate id"""

    async def _make_candidate(skills: Iterable[str] = ()) -> UUID:
        user_id = uuid4()
        async with session_factory() as session:
            for skill in skills:
                session.add(CandidateSkillModel(user_id=user_id, skill_id=skill))
            await session.commit()
        return user_id

    return _make_candidate


@pytest.fixture
def make_application(session_factory):
    """Insert an application directly in a given status, bypassing the use-cases"""

    async def _make_application(job: JobModel, status: ApplicationStatus = ApplicationStatus.PENDING) -> UUID:
        application_id = uuid4()
        now = datetime.now(timezone.utc)
        async with session_factory() as session:
            session.add(ApplicationModel(
                id=application_id,
                job_id=job.id,
                applicant_id=uuid4(),
                company_id=job.company_id,
                status=status.value,
                resume_url=RESUME["resume_url"],
                answers=[],
                match_score=0,
                is_withdrawn=status == ApplicationStatus.WITHDRAWN,
                created_at=now,
                updated_at=now,
            ))
            await session.commit()
        return application_id

    return _make_application


@pytest.fixture
def application_count(session_factory):
    """Read a job's stored application_count"""

    async def _application_count(job_id: UUID) -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(JobModel.application_count).where(JobModel.id == job_id)
            )
            return result.scalar_one()

    return _application_count


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model, optionally filtered"""

    async def _count_rows(model, *conditions) -> int:
        async with session_factory() as session:
            query = select(func.count()).select_from(model)
            if conditions:
                query = query.where(*conditions)
            result = await session.execute(query)
            return result.scalar_one()

    return _count_rows
