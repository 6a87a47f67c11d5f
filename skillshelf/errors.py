"""
skillshelf errors

InvalidSkill is isolated per skill during indexing; DuplicateSlug aborts
registry construction; NotFound and ReadError are returned to callers of
the loader.
"""

from typing import Optional


class SkillError(Exception):
    """Base class for all skillshelf errors."""


class InvalidSkill(SkillError):
    """A body file has a missing or malformed header."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DuplicateSlug(SkillError):
    """Two skill directories resolve to the same slug."""

    def __init__(self, slug: str, first, second):
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(f"duplicate skill slug '{slug}': {first} and {second}")


class NotFound(SkillError, KeyError):
    """Unknown slug, or an attachment path not discovered during indexing."""

    def __init__(self, slug: str, path: Optional[str] = None):
        self.slug = slug
        self.path = path
        if path is not None:
            message = f"attachment '{path}' not found in skill '{slug}'"
        else:
            message = f"skill '{slug}' not found"
        super().__init__(message)

    def __str__(self):
        # KeyError would repr() the message
        return self.args[0]


class ReadError(SkillError):
    """An indexed file could not be read."""

    def __init__(self, slug: str, path: str, reason: str):
        self.slug = slug
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read '{path}' of skill '{slug}': {reason}")
