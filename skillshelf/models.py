"""Value types for indexed skills and loaded documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from skillshelf.frontmatter import extract_section, split_frontmatter


class SectionKind(str, Enum):
    BODY = "body"
    ATTACHMENT = "attachment"


@dataclass(frozen=True)
class SkillUnit:
    """Index entry for one skill directory. Holds no document content."""

    slug: str
    name: str
    description: str
    directory: Path
    body_path: Path
    license: str = ""
    version: str = ""
    attachments: Tuple[str, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def body_name(self) -> str:
        return self.body_path.name

    def has_attachment(self, relpath: str) -> bool:
        return relpath in self.attachments

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "license": self.license,
            "version": self.version,
            "path": str(self.body_path),
            "attachments": list(self.attachments),
        }


@dataclass(frozen=True)
class Section:
    """A loaded document: the skill body or one of its attachments."""

    slug: str
    path: str
    kind: SectionKind
    content: str

    @property
    def is_body(self) -> bool:
        return self.kind is SectionKind.BODY

    @property
    def markdown(self) -> str:
        """Content without the frontmatter block (body only)."""
        if not self.is_body:
            return self.content
        _, body = split_frontmatter(self.content)
        return body

    def section(self, heading: str) -> Optional[str]:
        """Return the ``## heading`` block, or None if absent."""
        return extract_section(self.markdown, heading)
