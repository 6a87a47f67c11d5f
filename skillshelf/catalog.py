"""Text blocks for injecting skills into a host prompt."""

from typing import Iterable, Optional

from skillshelf.models import Section, SkillUnit

DEFAULT_HEADING = "Available skills"
MAX_DESCRIPTION = 200


def render_catalog(
    units: Iterable[SkillUnit],
    heading: str = DEFAULT_HEADING,
    max_description: Optional[int] = MAX_DESCRIPTION,
) -> str:
    """Render the startup index: one line per skill with its description.

    Args:
        units: Skills to list (a SkillRegistry works directly).
        heading: Markdown heading placed above the list.
        max_description: Truncate longer descriptions; None disables.
    """
    lines = []
    for unit in units:
        description = " ".join(unit.description.split())
        if max_description and len(description) > max_description:
            description = description[: max_description - 3].rstrip() + "..."
        lines.append(f"- **{unit.name}** (`{unit.slug}`): {description}")

    if not lines:
        return "No skills available."
    return f"## {heading}\n\n" + "\n".join(lines)


def render_skill(unit: SkillUnit, section: Section) -> str:
    """Render a loaded body or attachment as a tagged prompt block."""
    label = unit.name if section.is_body else f"{unit.name}/{section.path}"
    return f"[SKILL: {label}]\n{section.markdown.strip()}"
