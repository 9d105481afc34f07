"""
Use-case Input Schemas
Pydantic models validating caller payloads before any store access
"""
from datetime import datetime
from typing import List, Optional, Tuple, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jobmatch.core.config import settings
from jobmatch.core.exceptions import ValidationException
from jobmatch.domain.entities import ApplicationAnswer, Interview
from jobmatch.domain.enums import ApplicationStatus, InterviewType, NotificationKind

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class AnswerIn(BaseModel):
    """Answer to a screening question"""
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str = Field(min_length=1)
    answer: str = ""


class ApplicationSubmission(BaseModel):
    """
    Payload for submitting an application

    cover_letter and resume_url are opaque to the engine; resume_url only has
    to be present.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    resume_url: str = Field(min_length=1, max_length=1000)
    cover_letter: Optional[str] = None
    answers: List[AnswerIn] = Field(default_factory=list)

    def to_answers(self) -> tuple:
        return tuple(ApplicationAnswer(question=a.question, answer=a.answer) for a in self.answers)


class InterviewRequest(BaseModel):
    """Payload for scheduling an interview"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    scheduled_at: datetime
    interview_type: InterviewType
    location: Optional[str] = None
    interviewer_ids: List[UUID] = Field(default_factory=list)

    def to_interview(self) -> Interview:
        return Interview(
            scheduled_at=self.scheduled_at,
            interview_type=self.interview_type,
            location=self.location,
            interviewer_ids=tuple(self.interviewer_ids),
        )


class NoteRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(min_length=1, max_length=5000)


def parse_payload(schema: Type[SchemaT], payload: Union[SchemaT, dict, None]) -> SchemaT:
    """Validate a payload against schema, raising ValidationException on failure"""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload or {})
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or schema.__name__
        raise ValidationException(field, first.get("msg", "invalid value")) from e


def parse_uuid(value: Union[UUID, str], field: str) -> UUID:
    """Coerce an identifier to UUID"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationException(field, f"not a valid id: {value!r}")


def parse_status(value: Union[ApplicationStatus, str], field: str = "status") -> ApplicationStatus:
    """Coerce a status value to ApplicationStatus"""
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationException(field, f"unknown status {value!r} (expected one of: {allowed})")


def parse_notification_kind(value: Union[NotificationKind, str], field: str = "kind") -> NotificationKind:
    """Coerce a value to NotificationKind"""
    if isinstance(value, NotificationKind):
        return value
    try:
        return NotificationKind(value)
    except ValueError:
        allowed = ", ".join(k.value for k in NotificationKind)
        raise ValidationException(field, f"unknown notification kind {value!r} (expected one of: {allowed})")


def parse_page(limit: Optional[int], offset: int = 0) -> Tuple[int, int]:
    """
    Validate paging arguments

    A missing limit falls back to DEFAULT_PAGE_SIZE and any limit is capped at
    MAX_PAGE_SIZE. Non-positive limits and negative offsets are rejected.
    """
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationException("limit", f"must be a positive integer, got {limit!r}")
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ValidationException("offset", f"must be a non-negative integer, got {offset!r}")
    return min(limit, settings.MAX_PAGE_SIZE), offset
