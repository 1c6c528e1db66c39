"""
Experience model and the experience <-> skill association table
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


# Junction table for Experience <-> Skill many-to-many
experience_skills = Table(
    "experience_skills",
    Base.metadata,
    Column("experience_id", Integer, ForeignKey("experiences.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Experience(Base):
    """A job, project or role held by a user"""
    __tablename__ = "experiences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    company = Column(String(300), nullable=False)
    start_date = Column(String(10), nullable=True)  # "YYYY-MM-DD"
    end_date = Column(String(10), nullable=True)  # "YYYY-MM-DD" or null for current
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    skills = relationship(
        "Skill",
        secondary=experience_skills,
        lazy="selectin",
    )
