#!/usr/bin/env python3
"""
skillshelf CLI

    skillshelf list [--json]
    skillshelf show SLUG [PATH] [--section HEADING] [--strip-header]
    skillshelf files SLUG
    skillshelf catalog
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from skillshelf.catalog import render_catalog
from skillshelf.config import Settings
from skillshelf.errors import DuplicateSlug, NotFound, ReadError
from skillshelf.registry import SkillRegistry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOOKUP = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillshelf",
        description="Browse a directory of SKILL.md skills",
    )
    parser.add_argument("--root", action="append", default=None,
                        help="Skill root directory (repeatable, overrides SKILLSHELF_ROOTS)")
    parser.add_argument("--discover", metavar="BASE",
                        help="Find skill roots anywhere under BASE")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List indexed skills")
    p_list.add_argument("--json", action="store_true", help="Emit JSON")

    p_show = sub.add_parser("show", help="Print a skill body or attachment")
    p_show.add_argument("slug")
    p_show.add_argument("path", nargs="?", default=None, help="Attachment path, e.g. rules/x.md")
    p_show.add_argument("--section", help="Only print this '## ' section")
    p_show.add_argument("--strip-header", action="store_true",
                        help="Omit the frontmatter block of the body")

    p_files = sub.add_parser("files", help="List a skill's attachments")
    p_files.add_argument("slug")

    sub.add_parser("catalog", help="Print the skill catalog block")
    return parser


def open_registry(args, settings: Settings) -> SkillRegistry:
    if args.discover:
        return SkillRegistry.discover(
            args.discover, body_file=settings.body_file, max_depth=settings.max_depth
        )
    roots = args.root or settings.roots
    return SkillRegistry(roots, body_file=settings.body_file, max_depth=settings.max_depth)


def cmd_list(registry: SkillRegistry, args) -> int:
    if args.json:
        print(json.dumps([unit.to_dict() for unit in registry], ensure_ascii=False, indent=2))
        return EXIT_OK
    for unit in registry:
        version = unit.version or "-"
        print(f"{unit.slug}\t{version}\t{unit.description}")
    for slug, reason in sorted(registry.skipped.items()):
        logger.warning("Skipped %s: %s", slug, reason)
    return EXIT_OK


def cmd_show(registry: SkillRegistry, args) -> int:
    section = registry.load(args.slug, args.path)
    if args.section:
        text = section.section(args.section)
        if text is None:
            print(f"Section '{args.section}' not found in {args.slug}/{section.path}",
                  file=sys.stderr)
            return EXIT_LOOKUP
    elif args.strip_header:
        text = section.markdown
    else:
        text = section.content
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    return EXIT_OK


def cmd_files(registry: SkillRegistry, args) -> int:
    unit = registry.get(args.slug)
    for path in unit.attachments:
        print(path)
    return EXIT_OK


def cmd_catalog(registry: SkillRegistry, args) -> int:
    print(render_catalog(registry))
    return EXIT_OK


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "files": cmd_files,
    "catalog": cmd_catalog,
}


def resolve_level(name: str) -> int:
    """Map a level name to its number, falling back to INFO for unknown names."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    level = logging.DEBUG if args.verbose else resolve_level(settings.log_level)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )

    try:
        registry = open_registry(args, settings)
        return COMMANDS[args.command](registry, args)
    except DuplicateSlug as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except (NotFound, ReadError) as e:
        logger.error("%s", e)
        return EXIT_LOOKUP


if __name__ == "__main__":
    sys.exit(main())
