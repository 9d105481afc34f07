"""
Skill Directory Implementation
"""
from typing import FrozenSet
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobmatch.application.repositories.interfaces import ISkillDirectory
from jobmatch.core.exceptions import RepositoryException
from jobmatch.core.logging_config import logger
from jobmatch.infrastructure.persistence.models.candidate_skill import CandidateSkillModel


class SQLAlchemySkillDirectory(ISkillDirectory):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_candidate_skills(self, user_id: UUID) -> FrozenSet[str]:
        try:
            result = await self.session.execute(
                select(CandidateSkillModel.skill_id).where(CandidateSkillModel.user_id == user_id)
            )
            return frozenset(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Failed to load skills for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to load candidate skills: {str(e)}") from e
