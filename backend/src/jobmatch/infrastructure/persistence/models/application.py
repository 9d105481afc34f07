"""
Application ORM Models
SQLAlchemy models for job applications and their append-only children
"""
import uuid
from sqlalchemy import (
    Column, String, DateTime, Text, ForeignKey, Integer, Boolean, JSON, Uuid, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from jobmatch.core.database import Base
from jobmatch.domain.enums import ApplicationStatus, InterviewStatus

APPLICATION_UNIQUE_CONSTRAINT = "uq_applications_job_id_applicant_id"


class ApplicationModel(Base):
    """Job application table ORM model"""

    __tablename__ = "applications"

    # Primary Key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    company_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    # Application Details
    status = Column(String(50), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    resume_url = Column(String(1000), nullable=False)
    cover_letter = Column(Text, nullable=True)
    answers = Column(JSON, default=list, nullable=False)  # [{"question": ..., "answer": ...}]

    match_score = Column(Integer, nullable=False, default=0)

    # Withdrawal
    is_withdrawn = Column(Boolean, default=False, nullable=False)
    withdraw_reason = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    notes = relationship(
        "ApplicationNoteModel",
        order_by="ApplicationNoteModel.id",
        back_populates="application",
    )
    interviews = relationship(
        "ApplicationInterviewModel",
        order_by="ApplicationInterviewModel.id",
        back_populates="application",
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name=APPLICATION_UNIQUE_CONSTRAINT),
    )

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.status}>"


class ApplicationNoteModel(Base):
    """Append-only audit note"""

    __tablename__ = "application_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    author_id = Column(Uuid(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    application = relationship("ApplicationModel", back_populates="notes")

    def __repr__(self):
        return f"<ApplicationNoteModel {self.id} on {self.application_id}>"


class ApplicationInterviewModel(Base):
    """Append-only interview record"""

    __tablename__ = "application_interviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500), nullable=True)
    interviewer_ids = Column(JSON, default=list, nullable=False)  # list of user id strings
    interview_type = Column(String(20), nullable=False)  # "phone", "video", "in-person"
    status = Column(String(20), nullable=False, default=InterviewStatus.SCHEDULED.value)
    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    application = relationship("ApplicationModel", back_populates="interviews")

    def __repr__(self):
        return f"<ApplicationInterviewModel {self.interview_type} at {self.scheduled_at}>"
