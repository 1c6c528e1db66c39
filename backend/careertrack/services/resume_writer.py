"""
Persists a parsed resume: experiences, the user's skills and the links between them.

Everything runs on the caller's session, so a failure while inserting
experiences or upserting skills rolls the whole upload back. Individual
experience/skill links are written in savepoints and may fail on their own.
"""
import logging
from typing import Dict, List, Tuple

from sqlalchemy import func, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Experience, Skill, experience_skills
from ..schemas.resume import ParsedResume, SkillEntry, SavedResume

logger = logging.getLogger(__name__)


def collect_skills(parsed: ParsedResume) -> Dict[str, SkillEntry]:
    """
    Distinct skills by name: top-level skills first, then each experience's
    skills in order. The last occurrence of a name wins.
    """
    skills = {}
    for skill in parsed.skills:
        skills[skill.name] = skill
    for experience in parsed.experiences:
        for skill in experience.skills:
            skills[skill.name] = skill
    return skills


def experience_skill_pairs(parsed: ParsedResume) -> List[Tuple[int, str]]:
    """(experience index, skill name) for every skill listed under an experience, without repeats."""
    pairs = []
    seen = set()
    for index, experience in enumerate(parsed.experiences):
        for skill in experience.skills:
            pair = (index, skill.name)
            if pair not in seen:
                seen.add(pair)
                pairs.append(pair)
    return pairs


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Skill upsert is not supported on {dialect}")


async def upsert_skills(db: AsyncSession, user_id: str, skills: List[SkillEntry]) -> Dict[str, int]:
    """
    Insert or update skills on (user_id, skill_name).
    Returns the skill ids keyed by skill name.
    """
    if not skills:
        return {}

    dialect_insert = _insert_for(db)
    stmt = dialect_insert(Skill).values([
        {
            "user_id": user_id,
            "skill_name": skill.name,
            "proficiency": skill.proficiency,
            "source": skill.source,
        }
        for skill in skills
    ])
    stmt = stmt.on_conflict_do_update(
        index_elements=[Skill.user_id, Skill.skill_name],
        set_={
            "proficiency": stmt.excluded.proficiency,
            "source": stmt.excluded.source,
            "updated_at": func.now(),
        },
    ).returning(Skill.id, Skill.skill_name)

    result = await db.execute(stmt)
    return {row.skill_name: row.id for row in result}


async def link_experience_skill(db: AsyncSession, experience_id: int, skill_id: int) -> bool:
    """Insert one join row in its own savepoint. Returns False if the insert failed."""
    try:
        async with db.begin_nested():
            await db.execute(
                insert(experience_skills).values(experience_id=experience_id, skill_id=skill_id)
            )
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Skipping link experience={experience_id} skill={skill_id}: {e}")
        return False


async def save_parsed_resume(db: AsyncSession, user_id: str, parsed: ParsedResume) -> SavedResume:
    """
    Write a parsed resume for a user.

    1. Insert experiences; ids are resolved by position in parsed.experiences.
    2. Upsert the distinct skill set.
    3. Link every experience to the skills listed under it.

    Raises:
        SQLAlchemyError: steps 1 or 2 failed
    """
    # Step 1: experiences
    experiences = [
        Experience(
            user_id=user_id,
            title=entry.title,
            company=entry.company,
            start_date=entry.start_date,
            end_date=entry.end_date,
            description=entry.description,
            skills=[],
        )
        for entry in parsed.experiences
    ]
    if experiences:
        db.add_all(experiences)
        await db.flush()
    experience_ids = [experience.id for experience in experiences]

    # Step 2: skills
    skill_ids = await upsert_skills(db, user_id, list(collect_skills(parsed).values()))

    # Step 3: links
    links = 0
    for index, skill_name in experience_skill_pairs(parsed):
        skill_id = skill_ids.get(skill_name)
        if skill_id is None:
            logger.warning(f"Skill {skill_name!r} was not resolved; not linking it")
            continue
        if await link_experience_skill(db, experience_ids[index], skill_id):
            links += 1

    logger.info(
        f"Saved resume for user {user_id}: {len(experience_ids)} experiences, "
        f"{len(skill_ids)} skills, {links} links"
    )
    return SavedResume(experience_ids=experience_ids, skill_ids=skill_ids, links=links)
