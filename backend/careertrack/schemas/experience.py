"""
Experience schemas. Request bodies accept the frontend's camelCase date keys.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .skill import SkillResponse


class ExperienceCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    company: str = Field(min_length=1, max_length=300)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    description: Optional[str] = None

    class Config:
        populate_by_name = True

    @field_validator("start_date", "end_date", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ExperienceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=300)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    description: Optional[str] = None

    class Config:
        populate_by_name = True

    @field_validator("start_date", "end_date", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ExperienceResponse(BaseModel):
    id: int
    user_id: str
    title: str
    company: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    skills: List[SkillResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True
