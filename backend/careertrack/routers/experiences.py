"""
Experiences Router - manual experience CRUD and experience <-> skill links
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select

from ..database import get_db, describe_db_error
from ..models import Experience, Skill
from ..services.auth import AuthenticatedUser, get_current_user
from ..schemas.experience import ExperienceCreate, ExperienceUpdate, ExperienceResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/experiences", tags=["Experiences"])


# ============================================================================
# Helper Functions
# ============================================================================

async def get_user_experience(db: AsyncSession, user_id: str, experience_id: int) -> Experience:
    """Load one of the user's experiences or 404."""
    result = await db.execute(
        select(Experience).where(
            Experience.id == experience_id,
            Experience.user_id == user_id
        )
    )
    experience = result.scalar_one_or_none()
    if not experience:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Experience not found"
        )
    return experience


async def get_user_skill(db: AsyncSession, user_id: str, skill_id: int) -> Skill:
    result = await db.execute(
        select(Skill).where(Skill.id == skill_id, Skill.user_id == user_id)
    )
    skill = result.scalar_one_or_none()
    if not skill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Skill not found"
        )
    return skill


async def commit_or_400(db: AsyncSession):
    """Commit, turning storage errors into a 400 carrying the database message."""
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database write failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_db_error(e)
        )


def _iso(value):
    return value.isoformat() if value is not None else None


# ============================================================================
# Experience CRUD
# ============================================================================

@router.post("", response_model=ExperienceResponse, status_code=status.HTTP_201_CREATED)
async def create_experience(
    exp_data: ExperienceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Add an experience entered by hand."""
    experience = Experience(
        user_id=current_user.id,
        title=exp_data.title,
        company=exp_data.company,
        description=exp_data.description,
        start_date=_iso(exp_data.start_date),
        end_date=_iso(exp_data.end_date),
        skills=[],
    )
    db.add(experience)
    await commit_or_400(db)
    return experience


@router.get("", response_model=List[ExperienceResponse])
async def list_experiences(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """All of the user's experiences, most recent start date first."""
    result = await db.execute(
        select(Experience)
        .where(Experience.user_id == current_user.id)
        .order_by(Experience.start_date.desc().nulls_last(), Experience.id.desc())
    )
    return result.scalars().all()


@router.get("/{experience_id}", response_model=ExperienceResponse)
async def get_experience(
    experience_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    return await get_user_experience(db, current_user.id, experience_id)


@router.put("/{experience_id}", response_model=ExperienceResponse)
async def update_experience(
    experience_id: int,
    exp_data: ExperienceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Update the fields that were provided."""
    experience = await get_user_experience(db, current_user.id, experience_id)

    update_dict = exp_data.model_dump(exclude_unset=True)
    for field in ("title", "company"):
        if field in update_dict and update_dict[field] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} cannot be empty"
            )
    for field, value in update_dict.items():
        if field in ("start_date", "end_date"):
            value = _iso(value)
        setattr(experience, field, value)

    await commit_or_400(db)
    return experience


@router.delete("/{experience_id}")
async def delete_experience(
    experience_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Delete an experience and its skill links. The skills themselves are kept."""
    experience = await get_user_experience(db, current_user.id, experience_id)
    await db.delete(experience)
    await commit_or_400(db)
    return {"message": "Experience deleted"}


# ============================================================================
# Experience <-> Skill links
# ============================================================================

@router.post("/{experience_id}/skills/{skill_id}", response_model=ExperienceResponse)
async def link_skill(
    experience_id: int,
    skill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Link one of the user's skills to one of the user's experiences."""
    experience = await get_user_experience(db, current_user.id, experience_id)
    skill = await get_user_skill(db, current_user.id, skill_id)

    if all(linked.id != skill.id for linked in experience.skills):
        experience.skills.append(skill)
        await commit_or_400(db)
    return experience


@router.delete("/{experience_id}/skills/{skill_id}", response_model=ExperienceResponse)
async def unlink_skill(
    experience_id: int,
    skill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    experience = await get_user_experience(db, current_user.id, experience_id)

    for linked in experience.skills:
        if linked.id == skill_id:
            experience.skills.remove(linked)
            await commit_or_400(db)
            return experience

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Skill is not linked to this experience"
    )
