"""
Job Domain Entity
Job posting as seen by the application engine
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple
from uuid import UUID

from ..enums import JobStatus


@dataclass(frozen=True)
class Job:
    """Job posting domain entity"""

    id: UUID
    title: str
    company_id: UUID
    posted_by: UUID
    status: JobStatus = JobStatus.ACTIVE

    # Skill requirements (skill ids)
    required_skills: FrozenSet[str] = field(default_factory=frozenset)
    preferred_skills: FrozenSet[str] = field(default_factory=frozenset)

    # Aggregates maintained by the application engine
    application_count: int = 0
    applications: Tuple[UUID, ...] = ()

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_accepting_applications(self) -> bool:
        return self.status == JobStatus.ACTIVE

    def __str__(self) -> str:
        return f"Job({self.title}, status={self.status.value})"
