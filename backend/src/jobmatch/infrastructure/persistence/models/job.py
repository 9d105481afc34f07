"""
Job ORM Models
Job postings plus the ordered list of applications received
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON, Uuid, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from jobmatch.core.database import Base
from jobmatch.domain.enums import JobStatus


class JobModel(Base):
    """Job posting table ORM model"""

    __tablename__ = "jobs"

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Ownership
    title = Column(String(500), nullable=False)
    company_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    posted_by = Column(Uuid(as_uuid=True), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=JobStatus.ACTIVE.value, index=True)

    # Skill ids
    required_skills = Column(JSON, default=list, nullable=False)
    preferred_skills = Column(JSON, default=list, nullable=False)

    # Aggregates, only ever changed with atomic SQL expressions
    application_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    application_links = relationship(
        "JobApplicationLinkModel",
        order_by="JobApplicationLinkModel.position",
        back_populates="job",
    )

    def __repr__(self):
        return f"<JobModel {self.title} ({self.status})>"


class JobApplicationLinkModel(Base):
    """One row per application appended to a job's list"""

    __tablename__ = "job_application_links"

    position = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("applications.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    job = relationship("JobModel", back_populates="application_links")

    __table_args__ = (
        UniqueConstraint("job_id", "application_id", name="uq_job_application_links_job_id_application_id"),
    )

    def __repr__(self):
        return f"<JobApplicationLinkModel Job:{self.job_id} Application:{self.application_id}>"
