"""
CandidateSkill Model (Persistence)
Junction table linking users to the skills they hold.
"""
from sqlalchemy import Column, String, Integer, DateTime, Uuid, UniqueConstraint
from sqlalchemy.sql import func

from jobmatch.core.database import Base


class CandidateSkillModel(Base):
    __tablename__ = "candidate_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    skill_id = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", name="uq_candidate_skills_user_id_skill_id"),
    )

    def __repr__(self):
        return f"<CandidateSkillModel User:{self.user_id} Skill:{self.skill_id}>"
