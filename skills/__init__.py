"""ResumeAI skills - stateless tools for specific operations."""

from .base_skill import BaseSkill, SkillContext, SkillResult
from .ats_scorer import ATSScorerSkill, ATSScore

__all__ = [
    # Base
    "BaseSkill",
    "SkillContext",
    "SkillResult",
    # Skills
    "ATSScorerSkill",
    "ATSScore",
]
