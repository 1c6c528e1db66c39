"""
Dashboard Router - aggregates for the dashboard charts
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from ..database import get_db
from ..models import Experience, Skill
from ..services.auth import AuthenticatedUser, get_current_user
from ..services.insights import build_summary, analyze_timeline, skill_insights
from ..schemas.dashboard import DashboardSummary, TimelineResponse, SkillInsights

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


async def load_experiences(db: AsyncSession, user_id: str):
    result = await db.execute(select(Experience).where(Experience.user_id == user_id))
    return result.scalars().all()


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    experiences = await load_experiences(db, current_user.id)
    result = await db.execute(select(Skill).where(Skill.user_id == current_user.id))
    return build_summary(experiences, result.scalars().all())


@router.get("/timeline", response_model=TimelineResponse)
async def get_timeline(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Experiences on a timeline with career gaps (> 30 days) and overlaps."""
    return analyze_timeline(await load_experiences(db, current_user.id))


@router.get("/skills", response_model=SkillInsights)
async def get_skill_insights(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Skill usage counts and proficiency heatmap across experiences."""
    return skill_insights(await load_experiences(db, current_user.id))
