from .experience import Experience, experience_skills
from .skill import Skill, ProficiencyLevel

__all__ = [
    "Experience", "experience_skills",
    "Skill", "ProficiencyLevel",
]
