"""
skillshelf frontmatter: YAML header parsing for skill markdown files

A body file starts with a ``---`` line, YAML key/values, and a closing
``---`` line. The index only needs the header, so ``read_header`` stops
reading at the closing delimiter and never touches the body.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import yaml

from skillshelf.errors import InvalidSkill

logger = logging.getLogger(__name__)

DELIMITER = "---"
CLOSING_DELIMITERS = {"---", "..."}

# Headers longer than this are treated as unterminated
MAX_HEADER_LINES = 200


def read_header(path: Path, max_lines: int = MAX_HEADER_LINES) -> dict:
    """Read and parse only the frontmatter block of a markdown file.

    Args:
        path: Markdown file beginning with a ``---`` header.
        max_lines: Give up if no closing delimiter within this many lines.

    Returns:
        The parsed header mapping.

    Raises:
        InvalidSkill: header missing, unterminated, unreadable, or not a
            YAML mapping.
    """
    lines = []
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            first = fh.readline()
            if first.rstrip() != DELIMITER:
                raise InvalidSkill(path, "missing frontmatter header")
            for line in fh:
                if line.rstrip() in CLOSING_DELIMITERS:
                    break
                lines.append(line)
                if len(lines) > max_lines:
                    raise InvalidSkill(path, f"frontmatter longer than {max_lines} lines")
            else:
                raise InvalidSkill(path, "unterminated frontmatter header")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidSkill(path, f"unreadable: {e}") from e

    return parse_header("".join(lines), path)


def parse_header(text: str, path=None) -> dict:
    """Parse YAML header text into a dict."""
    try:
        header = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidSkill(path, f"malformed YAML header: {e}") from e

    if header is None:
        return {}
    if not isinstance(header, dict):
        raise InvalidSkill(path, "frontmatter is not a key-value mapping")
    return header


def split_frontmatter(content: str) -> Tuple[dict, str]:
    """Split markdown content into (header_dict, body_string).

    Content without a well-formed header returns ``({}, content)``.
    """
    if content.startswith("\ufeff"):
        content = content[1:]
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        return {}, content

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() in CLOSING_DELIMITERS:
            try:
                header = parse_header("".join(lines[1:idx]))
            except InvalidSkill as e:
                logger.debug("Ignoring unparsable header: %s", e.reason)
                return {}, content
            return header, "".join(lines[idx + 1:]).strip()

    return {}, content


def extract_section(body: str, heading: str) -> Optional[str]:
    """Extract one ``## heading`` section from a markdown body.

    Matching is case-insensitive. The section runs until the next heading
    of level two or higher. Headings inside fenced code blocks are ignored.

    Returns:
        Section text including its heading line, or None if not present.
    """
    wanted = heading.strip().lstrip("#").strip().lower()
    collected = None
    in_fence = False

    for line in body.split("\n"):
        stripped = line.strip()
        if stripped.startswith("```") or stripped.startswith("~~~"):
            in_fence = not in_fence
        elif not in_fence and (line.startswith("## ") or line.startswith("# ")):
            if collected is not None:
                break
            if line.startswith("## ") and line[3:].strip().lower() == wanted:
                collected = [line]
                continue
        if collected is not None:
            collected.append(line)

    if collected is None:
        return None
    return "\n".join(collected).strip()
