from types import SimpleNamespace

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from careertrack.models import Experience, Skill, ProficiencyLevel, experience_skills
from careertrack.schemas.resume import ParsedResume
from careertrack.services.resume_writer import (
    collect_skills,
    experience_skill_pairs,
    save_parsed_resume,
    upsert_skills,
)
from careertrack.schemas.resume import SkillEntry

USER = "user-alice"


async def links_for(db, experience_id):
    result = await db.execute(
        select(Skill.skill_name)
        .join(experience_skills, experience_skills.c.skill_id == Skill.id)
        .where(experience_skills.c.experience_id == experience_id)
        .order_by(Skill.skill_name)
    )
    return list(result.scalars())


def test_collect_skills_last_seen_wins():
    parsed = ParsedResume.model_validate({
        "skills": [{"name": "Go", "proficiency": "Beginner"}, "SQL"],
        "experiences": [
            {"title": "A", "company": "X", "skills": [{"name": "Go", "proficiency": "Intermediate"}]},
            {"title": "B", "company": "Y", "skills": [{"name": "Go", "proficiency": "Advanced"}]},
        ],
    })

    skills = collect_skills(parsed)

    assert list(skills) == ["Go", "SQL"]
    assert skills["Go"].proficiency == ProficiencyLevel.ADVANCED


def test_experience_skill_pairs_are_distinct():
    parsed = ParsedResume.model_validate({"experiences": [
        {"title": "A", "company": "X", "skills": ["Go", "Go", "SQL"]},
        {"title": "B", "company": "Y", "skills": ["Go"]},
    ]})
    assert experience_skill_pairs(parsed) == [(0, "Go"), (0, "SQL"), (1, "Go")]


async def test_save_links_experiences_by_position(db_session):
    parsed = ParsedResume.model_validate({"experiences": [
        {"title": "Engineer", "company": "Acme", "start_date": "2020-01", "skills": ["Python"]},
        {"title": "Engineer", "company": "Globex", "start_date": "2022-01", "skills": ["Go"]},
    ]})

    saved = await save_parsed_resume(db_session, USER, parsed)
    await db_session.commit()

    assert len(saved.experience_ids) == 2
    assert saved.experience_ids[0] != saved.experience_ids[1]
    assert saved.links == 2
    assert await links_for(db_session, saved.experience_ids[0]) == ["Python"]
    assert await links_for(db_session, saved.experience_ids[1]) == ["Go"]

    result = await db_session.execute(
        select(Experience.company).where(Experience.id == saved.experience_ids[1])
    )
    assert result.scalar_one() == "Globex"


async def test_save_upserts_top_level_skills_without_links(db_session):
    parsed = ParsedResume.model_validate({"skills": ["Docker", "Kubernetes"]})

    saved = await save_parsed_resume(db_session, USER, parsed)
    await db_session.commit()

    assert saved.experience_ids == []
    assert set(saved.skill_ids) == {"Docker", "Kubernetes"}
    assert saved.links == 0


async def test_reparsing_updates_skills_instead_of_duplicating(db_session):
    first = ParsedResume.model_validate({"experiences": [
        {"title": "Dev", "company": "Acme", "skills": [{"name": "Go", "proficiency": "Beginner"}]},
    ]})
    second = ParsedResume.model_validate({"experiences": [
        {"title": "Senior Dev", "company": "Acme", "skills": [{"name": "Go", "proficiency": "Advanced"}]},
    ]})

    saved_first = await save_parsed_resume(db_session, USER, first)
    saved_second = await save_parsed_resume(db_session, USER, second)
    await db_session.commit()

    assert saved_first.skill_ids["Go"] == saved_second.skill_ids["Go"]
    result = await db_session.execute(select(Skill).where(Skill.user_id == USER))
    skills = result.scalars().all()
    assert len(skills) == 1
    assert skills[0].proficiency == ProficiencyLevel.ADVANCED
    assert await links_for(db_session, saved_second.experience_ids[0]) == ["Go"]


async def test_same_skill_name_for_different_users(db_session):
    alice = await upsert_skills(db_session, "user-alice", [SkillEntry(name="Go")])
    bob = await upsert_skills(db_session, "user-bob", [SkillEntry(name="Go")])
    await db_session.commit()

    assert alice["Go"] != bob["Go"]


async def test_failed_link_is_skipped(db_session, caplog):
    from careertrack.services.resume_writer import link_experience_skill

    parsed = ParsedResume.model_validate({"experiences": [
        {"title": "Dev", "company": "Acme", "skills": ["Go"]},
    ]})
    saved = await save_parsed_resume(db_session, USER, parsed)

    # The same pair again violates the join table's primary key
    ok = await link_experience_skill(db_session, saved.experience_ids[0], saved.skill_ids["Go"])
    await db_session.commit()

    assert ok is False
    assert await links_for(db_session, saved.experience_ids[0]) == ["Go"]


def test_unsupported_dialect_is_rejected():
    from careertrack.services.resume_writer import _insert_for

    db = SimpleNamespace(get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql")))

    with pytest.raises(ValueError, match="not supported on mysql"):
        _insert_for(db)


async def test_failed_skill_upsert_leaves_no_experiences(session_maker, monkeypatch):
    from careertrack.services import resume_writer

    async def failing_upsert(db, user_id, skills):
        raise IntegrityError("INSERT INTO skills", {}, Exception("constraint failed"))

    monkeypatch.setattr(resume_writer, "upsert_skills", failing_upsert)
    parsed = ParsedResume.model_validate({"experiences": [
        {"title": "Dev", "company": "Acme", "skills": ["Go"]},
    ]})

    async with session_maker() as db:
        with pytest.raises(IntegrityError):
            await save_parsed_resume(db, USER, parsed)
        await db.rollback()

    async with session_maker() as db:
        result = await db.execute(select(Experience).where(Experience.user_id == USER))
        assert result.scalars().all() == []
