"""
Skills Router - list, upsert and delete the user's skills
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete

from ..database import get_db, describe_db_error
from ..models import Skill, experience_skills
from ..services.auth import AuthenticatedUser, get_current_user
from ..services.resume_writer import upsert_skills
from ..schemas.resume import SkillEntry
from ..schemas.skill import SkillUpsert, SkillResponse
from .experiences import get_user_skill, commit_or_400

router = APIRouter(prefix="/api/skills", tags=["Skills"])


@router.get("", response_model=List[SkillResponse])
async def list_skills(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    result = await db.execute(
        select(Skill)
        .where(Skill.user_id == current_user.id)
        .order_by(Skill.skill_name)
    )
    return result.scalars().all()


@router.post("", response_model=SkillResponse)
async def upsert_skill(
    skill_data: SkillUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Create a skill, or update proficiency/source if the user already has one with this name."""
    entry = SkillEntry(
        name=skill_data.skill_name,
        proficiency=skill_data.proficiency,
        source=skill_data.source,
    )
    try:
        skill_ids = await upsert_skills(db, current_user.id, [entry])
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_db_error(e)
        )
    await commit_or_400(db)

    return await db.get(Skill, skill_ids[entry.name], populate_existing=True)


@router.delete("/{skill_id}")
async def delete_skill(
    skill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Delete a skill and unlink it from every experience."""
    skill = await get_user_skill(db, current_user.id, skill_id)
    await db.execute(delete(experience_skills).where(experience_skills.c.skill_id == skill.id))
    await db.delete(skill)
    await commit_or_400(db)
    return {"message": "Skill deleted"}
