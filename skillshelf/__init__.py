"""
skillshelf: progressive-disclosure loader for SKILL.md corpora

A registry indexes skill directories (name + description only), then
loads a skill's body or its reference/rule files on demand.
"""

from skillshelf.errors import DuplicateSlug, InvalidSkill, NotFound, ReadError, SkillError
from skillshelf.loader import UnitLoader
from skillshelf.models import Section, SectionKind, SkillUnit
from skillshelf.registry import SkillRegistry

__version__ = "0.1.0"

__all__ = [
    "SkillRegistry",
    "UnitLoader",
    "SkillUnit",
    "Section",
    "SectionKind",
    "SkillError",
    "InvalidSkill",
    "DuplicateSlug",
    "NotFound",
    "ReadError",
]
