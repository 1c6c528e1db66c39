"""
Skill model - one row per (user, skill name), refreshed on every resume parse
"""
from sqlalchemy import (
    Column, Integer, String, DateTime, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.sql import func
from ..database import Base
import enum


class ProficiencyLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Skill(Base):
    """A skill owned by a user, linked to the experiences where it was used"""
    __tablename__ = "skills"
    __table_args__ = (
        UniqueConstraint("user_id", "skill_name", name="uq_skills_user_skill_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    skill_name = Column(String(100), nullable=False)
    proficiency = Column(
        SQLEnum(
            ProficiencyLevel,
            name="proficiency_level",
            values_callable=lambda levels: [level.value for level in levels],
        ),
        nullable=True,
    )
    source = Column(String(50), nullable=False, default="resume")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
