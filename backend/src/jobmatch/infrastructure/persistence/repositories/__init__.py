"""SQLAlchemy repository implementations"""

from .application import SQLAlchemyApplicationRepository
from .job import SQLAlchemyJobRepository
from .notification import SQLAlchemyNotificationRepository
from .skill_directory import SQLAlchemySkillDirectory

__all__ = [
    "SQLAlchemyApplicationRepository",
    "SQLAlchemyJobRepository",
    "SQLAlchemyNotificationRepository",
    "SQLAlchemySkillDirectory",
]
