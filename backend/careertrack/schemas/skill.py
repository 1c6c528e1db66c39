"""
Skill schemas
"""
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..models.skill import ProficiencyLevel

# Words the model (or a user) may use instead of the three stored levels
PROFICIENCY_ALIASES = {
    "beginner": ProficiencyLevel.BEGINNER,
    "novice": ProficiencyLevel.BEGINNER,
    "basic": ProficiencyLevel.BEGINNER,
    "intermediate": ProficiencyLevel.INTERMEDIATE,
    "advanced": ProficiencyLevel.ADVANCED,
    "expert": ProficiencyLevel.ADVANCED,
    "proficient": ProficiencyLevel.ADVANCED,
}


def match_proficiency(value) -> Optional[ProficiencyLevel]:
    """Case-insensitive lookup of a proficiency level. Unknown values give None."""
    if isinstance(value, ProficiencyLevel):
        return value
    if not isinstance(value, str):
        return None
    return PROFICIENCY_ALIASES.get(value.strip().lower())


class SkillUpsert(BaseModel):
    skill_name: str = Field(min_length=1, max_length=100)
    proficiency: Optional[ProficiencyLevel] = None
    source: str = "manual"

    @field_validator("skill_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("skill_name must not be blank")
        return v

    @field_validator("proficiency", mode="before")
    @classmethod
    def parse_proficiency(cls, v):
        if v is None or v == "":
            return None
        level = match_proficiency(v)
        if level is None:
            raise ValueError("proficiency must be one of Beginner, Intermediate, Advanced")
        return level


class SkillResponse(BaseModel):
    id: int
    skill_name: str
    proficiency: Optional[ProficiencyLevel] = None
    source: str

    class Config:
        from_attributes = True
