"""
skillshelf registry: indexes skill directories and provides lookup

Each immediate subdirectory of a root that holds a body file (``SKILL.md``)
is one skill, keyed by its directory name (the slug). Only the header of
the body file is read while indexing; content is read later through the
loader.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from skillshelf.errors import DuplicateSlug, InvalidSkill, NotFound
from skillshelf.frontmatter import read_header
from skillshelf.loader import UnitLoader
from skillshelf.models import Section, SkillUnit

logger = logging.getLogger(__name__)

BODY_FILE = "SKILL.md"
SIDECAR_FILE = "metadata.json"
DEFAULT_MAX_DEPTH = 4

# Directory names never walked for attachments
SKIP_DIRS = {"__pycache__", "node_modules"}

PathLike = Union[str, os.PathLike]


class SkillRegistry:
    """Read-only index of skills under one or more root directories."""

    def __init__(
        self,
        roots: Union[PathLike, Iterable[PathLike]],
        body_file: str = BODY_FILE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """
        Args:
            roots: A root directory or a list of them. Each immediate
                subdirectory containing ``body_file`` becomes a skill.
            body_file: Name of the body document inside a skill directory.
            max_depth: How many directory levels below a skill are walked
                when discovering attachments.

        Raises:
            DuplicateSlug: two skill directories share a slug.
        """
        if isinstance(roots, (str, os.PathLike)):
            roots = [roots]
        self.roots = _unique_roots(roots)
        self.body_file = body_file
        self.max_depth = max_depth
        self.skipped: Dict[str, str] = {}
        self._index: Dict[str, SkillUnit] = self._scan()
        self.loader = UnitLoader(self)

    @classmethod
    def discover(cls, base: PathLike, search_depth: int = 3, **kwargs) -> "SkillRegistry":
        """Build a registry from every skill root found under ``base``.

        Useful when the nesting of the corpus is not known in advance
        (``skills/x``, ``skills/skills/x`` or ``x`` at the top level).
        """
        body_file = kwargs.get("body_file", BODY_FILE)
        roots = find_roots(Path(base).expanduser(), body_file, search_depth)
        logger.debug("Discovered %d skill roots under %s", len(roots), base)
        return cls(roots, **kwargs)

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _scan(self) -> Dict[str, SkillUnit]:
        index: Dict[str, SkillUnit] = {}
        seen: Dict[str, Path] = {}
        folded: Dict[str, Path] = {}

        for root in self.roots:
            for directory in self._iter_candidates(root):
                slug = directory.name
                if slug in seen:
                    raise DuplicateSlug(slug, seen[slug], directory)
                seen[slug] = directory

                other = folded.setdefault(slug.casefold(), directory)
                if other != directory:
                    logger.warning(
                        "Skill slugs differ only by case: %s and %s", other, directory
                    )

                try:
                    unit = index_skill(
                        directory,
                        directory / self.body_file,
                        max_depth=self.max_depth,
                    )
                except InvalidSkill as e:
                    logger.warning("Skipping skill %s: %s", slug, e.reason)
                    self.skipped[slug] = e.reason
                    continue
                index[slug] = unit

        if index:
            logger.info("Skills registry: %d skills indexed", len(index))
        else:
            logger.info("Skills registry: no skills found")
        return index

    def _iter_candidates(self, root: Path) -> Iterator[Path]:
        """Yield subdirectories of ``root`` that contain a body file."""
        if not root.is_dir():
            logger.warning("Skill root does not exist or is not a directory: %s", root)
            return
        try:
            children = sorted(root.iterdir())
        except OSError as e:
            logger.error("Cannot list skill root %s: %s", root, e)
            return

        for child in children:
            if child.name.startswith(".") or not child.is_dir():
                continue
            if not (child / self.body_file).is_file():
                logger.debug("No %s in %s, not a skill", self.body_file, child)
                continue
            yield child

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, slug: str) -> SkillUnit:
        """Get skill metadata by slug.

        Raises:
            NotFound: the slug is not indexed.
        """
        try:
            return self._index[slug]
        except KeyError:
            raise NotFound(slug) from None

    def list_all(self) -> List[SkillUnit]:
        """List all indexed skills, sorted by slug."""
        return [self._index[slug] for slug in sorted(self._index)]

    def slugs(self) -> List[str]:
        return sorted(self._index)

    def __contains__(self, slug) -> bool:
        return slug in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[SkillUnit]:
        return iter(self.list_all())

    # ------------------------------------------------------------------
    # Loading (delegates to UnitLoader)
    # ------------------------------------------------------------------

    def load(self, slug: str, path: Optional[str] = None) -> Section:
        """Load a skill's body, or one of its attachments when ``path`` is given."""
        return self.loader.load(slug, path)

    def load_body(self, slug: str) -> Section:
        return self.loader.load(slug)

    def load_attachment(self, slug: str, path: str) -> Section:
        return self.loader.load(slug, path)

    def read_section(self, slug: str, heading: str, path: Optional[str] = None) -> Optional[str]:
        """Return one ``## heading`` block from a skill document."""
        return self.load(slug, path).section(heading)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def index_skill(directory: Path, body_path: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> SkillUnit:
    """Build the index entry for one skill directory.

    Raises:
        InvalidSkill: header missing or lacking ``name`` / ``description``.
    """
    header = read_header(body_path)

    name = _as_text(header.get("name"))
    if not name:
        raise InvalidSkill(body_path, "header has no 'name'")
    description = _as_text(header.get("description"))
    if not description:
        raise InvalidSkill(body_path, "header has no 'description'")

    attachments = discover_attachments(directory, body_path.name, max_depth)
    return SkillUnit(
        slug=directory.name,
        name=name,
        description=description,
        directory=directory,
        body_path=body_path,
        license=_as_text(header.get("license")),
        version=_resolve_version(header, directory, attachments),
        attachments=attachments,
        metadata=header,
    )


def discover_attachments(directory: Path, body_name: str, max_depth: int) -> Tuple[str, ...]:
    """Walk a skill directory and return attachment paths relative to it.

    Hidden entries and the body file are excluded, as is anything that
    resolves outside the skill directory.
    """
    base = directory.resolve()
    found = []

    for dirpath, dirnames, filenames in os.walk(directory):
        current = Path(dirpath)
        depth = len(current.relative_to(directory).parts)
        if depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRS
            )

        for filename in filenames:
            if filename.startswith("."):
                continue
            if depth == 0 and filename == body_name:
                continue
            path = current / filename
            if path.is_symlink() and not _is_within(path.resolve(), base):
                logger.warning("Ignoring attachment outside skill directory: %s", path)
                continue
            found.append(path.relative_to(directory).as_posix())

    return tuple(sorted(found))


def find_roots(base: Path, body_file: str = BODY_FILE, max_depth: int = 3) -> List[Path]:
    """Find directories whose children are skill directories.

    A body file nested inside an already-found skill belongs to that
    skill as an attachment and does not start a new root.
    """
    if not base.is_dir():
        logger.warning("Discovery base is not a directory: %s", base)
        return []

    bodies = sorted(base.rglob(body_file), key=lambda p: (len(p.parts), str(p)))
    skill_dirs: List[Path] = []
    roots: List[Path] = []

    for body in bodies:
        skill_dir = body.parent
        relative = skill_dir.relative_to(base).parts
        if not relative:
            # base itself is a skill; its nested body files are attachments
            logger.warning("Discovery base %s is a skill directory, not a root", base)
            skill_dirs.append(skill_dir)
            continue
        if len(relative) > max_depth:
            continue
        if any(part.startswith(".") for part in relative):
            continue
        if any(_is_within(skill_dir, known) for known in skill_dirs):
            continue
        skill_dirs.append(skill_dir)
        if skill_dir.parent not in roots:
            roots.append(skill_dir.parent)

    return roots


def _unique_roots(roots: Iterable[PathLike]) -> List[Path]:
    unique = []
    seen = set()
    for raw in roots:
        path = Path(raw).expanduser()
        key = str(path.resolve())
        if key in seen:
            logger.debug("Ignoring repeated skill root %s", path)
            continue
        seen.add(key)
        unique.append(path)
    return unique


def _resolve_version(header: dict, directory: Path, attachments: Tuple[str, ...]) -> str:
    """Header ``version``, then ``metadata.version``, then the metadata.json sidecar."""
    version = _as_text(header.get("version"))
    if version:
        return version

    nested = header.get("metadata")
    if isinstance(nested, dict):
        version = _as_text(nested.get("version"))
        if version:
            return version

    if SIDECAR_FILE not in attachments:
        return ""
    try:
        sidecar = json.loads((directory / SIDECAR_FILE).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable %s in %s: %s", SIDECAR_FILE, directory, e)
        return ""
    if isinstance(sidecar, dict):
        return _as_text(sidecar.get("version"))
    return ""


def _as_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True
