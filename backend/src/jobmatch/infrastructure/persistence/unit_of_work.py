"""
SQLAlchemy Unit of Work
One AsyncSession = one transaction scope shared by every repository of a use-case
"""
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from jobmatch.application.repositories.interfaces import IUnitOfWork
from jobmatch.application.services.notification import INotificationDispatcher
from jobmatch.core.database import get_session_factory
from jobmatch.core.logging_config import logger
from jobmatch.infrastructure.persistence.repositories import (
    SQLAlchemyApplicationRepository,
    SQLAlchemyJobRepository,
    SQLAlchemySkillDirectory,
)
from jobmatch.infrastructure.services.notification_service import SQLAlchemyNotificationDispatcher

DispatcherFactory = Callable[[AsyncSession], INotificationDispatcher]


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    Transaction scope for a single use-case

    Usage:
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            await uow.applications.create(application)
            await uow.jobs.increment_application_counter(job_id, application.id)

    Leaving the block without an exception commits. Any exception rolls back
    every write made through the bound repositories, notifications included.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        dispatcher_factory: Optional[DispatcherFactory] = None,
    ):
        self._session_factory = session_factory or get_session_factory()
        self._dispatcher_factory = dispatcher_factory or SQLAlchemyNotificationDispatcher
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.applications = SQLAlchemyApplicationRepository(self.session)
        self.jobs = SQLAlchemyJobRepository(self.session)
        self.skills = SQLAlchemySkillDirectory(self.session)
        self.notifications = self._dispatcher_factory(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                logger.debug(f"Rolling back unit of work after {exc_type.__name__}")
                await self.rollback()
        finally:
            await self.session.close()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
