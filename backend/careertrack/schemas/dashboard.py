"""
Dashboard schemas
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel


class DashboardSummary(BaseModel):
    total_skills: int
    total_companies: int
    avg_duration_months: float
    most_used_skill: Optional[str] = None


class TimelineEntry(BaseModel):
    title: str
    company: str
    start: date
    end: date
    duration_days: int


class TimelineGap(BaseModel):
    start: date
    end: date
    duration_days: int


class TimelineOverlap(BaseModel):
    experience1: str
    experience2: str
    overlap_start: date
    overlap_end: date


class TimelineResponse(BaseModel):
    experiences: List[TimelineEntry]
    gaps: List[TimelineGap]
    overlaps: List[TimelineOverlap]


class SkillCount(BaseModel):
    skill: str
    count: int


class HeatmapCell(BaseModel):
    x: str
    y: int


class HeatmapRow(BaseModel):
    id: str
    data: List[HeatmapCell]


class SkillInsights(BaseModel):
    frequency: List[SkillCount]
    heatmap: List[HeatmapRow]
