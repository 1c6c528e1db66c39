"""
Career insights for the dashboard: summary numbers, timeline gaps/overlaps
and skill usage aggregates.

All functions are pure; they take Experience/Skill rows (or anything with the
same attributes) and never touch the database.
"""
from collections import Counter
from datetime import date
from typing import Iterable, List, Optional

from ..models.skill import ProficiencyLevel
from ..schemas.dashboard import (
    DashboardSummary, TimelineEntry, TimelineGap, TimelineOverlap,
    TimelineResponse, SkillCount, HeatmapCell, HeatmapRow, SkillInsights,
)

GAP_THRESHOLD_DAYS = 30
PROFICIENCY_ORDER = [
    ProficiencyLevel.BEGINNER,
    ProficiencyLevel.INTERMEDIATE,
    ProficiencyLevel.ADVANCED,
]


def _parse(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def _linked_skills(experiences: Iterable) -> list:
    return [skill for exp in experiences for skill in (exp.skills or []) if skill is not None]


def build_summary(experiences: List, skills: List, today: Optional[date] = None) -> DashboardSummary:
    """Headline numbers: distinct skills, distinct companies, average tenure, most linked skill."""
    today = today or date.today()

    durations = []
    for exp in experiences:
        start = _parse(exp.start_date)
        if start is None:
            continue
        end = _parse(exp.end_date) or today
        durations.append(months_between(start, end))

    usage = Counter(skill.skill_name for skill in _linked_skills(experiences))
    most_used = usage.most_common(1)

    return DashboardSummary(
        total_skills=len({skill.skill_name for skill in skills}),
        total_companies=len({exp.company for exp in experiences}),
        avg_duration_months=sum(durations) / len(durations) if durations else 0,
        most_used_skill=most_used[0][0] if most_used else None,
    )


def analyze_timeline(experiences: List, today: Optional[date] = None) -> TimelineResponse:
    """
    Order experiences by start date and report gaps longer than 30 days
    and overlaps between consecutive experiences.
    Experiences without a readable start date are left out.
    """
    today = today or date.today()

    entries = []
    for exp in experiences:
        start = _parse(exp.start_date)
        if start is None:
            continue
        end = _parse(exp.end_date) or today
        entries.append(TimelineEntry(
            title=exp.title,
            company=exp.company,
            start=start,
            end=end,
            duration_days=(end - start).days,
        ))
    entries.sort(key=lambda entry: entry.start)

    gaps = []
    overlaps = []
    for previous, current in zip(entries, entries[1:]):
        gap_days = (current.start - previous.end).days
        if gap_days > GAP_THRESHOLD_DAYS:
            gaps.append(TimelineGap(start=previous.end, end=current.start, duration_days=gap_days))
        if previous.end > current.start:
            overlaps.append(TimelineOverlap(
                experience1=f"{previous.title} @ {previous.company}",
                experience2=f"{current.title} @ {current.company}",
                overlap_start=current.start,
                overlap_end=min(previous.end, current.end),
            ))

    return TimelineResponse(experiences=entries, gaps=gaps, overlaps=overlaps)


def aggregate_skills(skills: Iterable) -> List[dict]:
    """Count occurrences of each skill name, in first-seen order."""
    counts = Counter(skill.skill_name for skill in skills)
    return [{"skill_name": name, "count": count} for name, count in counts.items()]


def skill_frequency(experiences: List) -> List[SkillCount]:
    """How many experiences each skill is linked to."""
    return [
        SkillCount(skill=row["skill_name"], count=row["count"])
        for row in aggregate_skills(_linked_skills(experiences))
    ]


def proficiency_heatmap(experiences: List) -> List[HeatmapRow]:
    """Per skill, how often it appears at each proficiency level. Skills without a level are ignored."""
    rows = {}
    for skill in _linked_skills(experiences):
        if not skill.proficiency:
            continue
        level = ProficiencyLevel(skill.proficiency)
        counts = rows.setdefault(skill.skill_name, Counter())
        counts[level] += 1

    return [
        HeatmapRow(
            id=name,
            data=[HeatmapCell(x=level.value, y=counts[level]) for level in PROFICIENCY_ORDER],
        )
        for name, counts in rows.items()
    ]


def skill_insights(experiences: List) -> SkillInsights:
    return SkillInsights(
        frequency=skill_frequency(experiences),
        heatmap=proficiency_heatmap(experiences),
    )
