"""
Schemas for the structured resume returned by the model.

The model output is untrusted: every field is checked here before anything
touches the database. Dates are canonicalized to "YYYY-MM-DD" on the way in.
"""
import logging
from typing import List, Optional, Dict
from pydantic import BaseModel, Field, field_validator, model_validator

from ..models.skill import ProficiencyLevel
from ..services.dates import canonicalize_date
from .skill import match_proficiency

logger = logging.getLogger(__name__)


def _none_to_list(v):
    return [] if v is None else v


class SkillEntry(BaseModel):
    name: str = Field(max_length=100)
    proficiency: Optional[ProficiencyLevel] = None
    source: str = Field(default="resume", max_length=50)

    @model_validator(mode="before")
    @classmethod
    def accept_plain_names(cls, data):
        # The model sometimes returns ["Python", "SQL"] instead of objects
        if isinstance(data, str):
            return {"name": data}
        if isinstance(data, dict) and "name" not in data and "skill_name" in data:
            data = dict(data)
            data["name"] = data.pop("skill_name")
        return data

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("skill name must not be blank")
        return v

    @field_validator("proficiency", mode="before")
    @classmethod
    def parse_proficiency(cls, v):
        if v is None:
            return None
        level = match_proficiency(v)
        if level is None:
            logger.warning(f"Dropping unrecognized proficiency: {v!r}")
        return level

    @field_validator("source", mode="before")
    @classmethod
    def default_source(cls, v):
        return v or "resume"


class EducationEntry(BaseModel):
    institution: Optional[str] = None
    period: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def accept_plain_names(cls, data):
        if isinstance(data, str):
            return {"institution": data}
        return data


class ExperienceEntry(BaseModel):
    # Lengths match the database columns
    title: str = Field(max_length=200)
    company: str = Field(max_length=300)
    start_date: Optional[str] = None  # "YYYY-MM-DD"
    end_date: Optional[str] = None
    description: Optional[str] = None
    skills: List[SkillEntry] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def canonical_date(cls, v):
        return canonicalize_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def join_bullets(cls, v):
        if isinstance(v, list):
            return "\n".join(str(item) for item in v)
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def skills_list(cls, v):
        return _none_to_list(v)


class ParsedResume(BaseModel):
    """Complete structured resume as requested from the model"""
    skills: List[SkillEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    experiences: List[ExperienceEntry] = Field(default_factory=list)

    @field_validator("skills", "education", "experiences", mode="before")
    @classmethod
    def lists(cls, v):
        return _none_to_list(v)


class SavedResume(BaseModel):
    """Identifiers produced by persisting a parsed resume"""
    experience_ids: List[int] = Field(default_factory=list)  # same order as ParsedResume.experiences
    skill_ids: Dict[str, int] = Field(default_factory=dict)
    links: int = 0


class ResumeUploadResponse(BaseModel):
    message: str
    skills: List[SkillEntry]
    education: List[EducationEntry]
    experiences: List[ExperienceEntry]
    saved: SavedResume
