"""
skillshelf loader: on-demand reads of skill bodies and attachments

Only paths discovered while indexing can be read, so a request such as
``../../etc/passwd`` fails with NotFound before any filesystem access.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from skillshelf.errors import NotFound, ReadError
from skillshelf.models import Section, SectionKind, SkillUnit

logger = logging.getLogger(__name__)


class UnitLoader:
    """Read and cache skill documents for a registry."""

    def __init__(self, registry):
        self.registry = registry
        self._cache: Dict[Tuple[str, str], Section] = {}
        self._lock = threading.Lock()

    def load(self, slug: str, path: Optional[str] = None) -> Section:
        """Load a skill body, or an attachment when ``path`` is given.

        Args:
            slug: Skill slug (directory name).
            path: Attachment path relative to the skill directory,
                e.g. ``rules/error-never-swallow.md``.

        Returns:
            The loaded Section.

        Raises:
            NotFound: unknown slug, or path not among the skill's attachments.
            ReadError: the indexed file could not be read as UTF-8 text.
        """
        unit = self.registry.get(slug)

        if path is None:
            relpath = unit.body_name
            kind = SectionKind.BODY
        else:
            relpath = normalize_path(path)
            if not unit.has_attachment(relpath):
                raise NotFound(slug, path)
            kind = SectionKind.ATTACHMENT

        key = (slug, relpath)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        section = Section(
            slug=slug,
            path=relpath,
            kind=kind,
            content=self._read(unit, relpath),
        )
        logger.debug("Loaded %s/%s (%d chars)", slug, relpath, len(section.content))

        with self._lock:
            return self._cache.setdefault(key, section)

    def is_cached(self, slug: str, path: Optional[str] = None) -> bool:
        if path is None:
            relpath = self.registry.get(slug).body_name
        else:
            relpath = normalize_path(path)
        with self._lock:
            return (slug, relpath) in self._cache

    def _read(self, unit: SkillUnit, relpath: str) -> str:
        file_path = unit.directory / relpath
        try:
            return file_path.read_bytes().decode("utf-8")
        except OSError as e:
            logger.error("Failed to read %s: %s", file_path, e)
            raise ReadError(unit.slug, relpath, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            logger.error("Failed to decode %s: %s", file_path, e)
            raise ReadError(unit.slug, relpath, "not valid UTF-8 text") from e


def normalize_path(path: str) -> str:
    """Normalize separators and strip leading ``./``; ``..`` is left alone."""
    normalized = str(path).replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized
