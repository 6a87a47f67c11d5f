"""
skillshelf configuration

Values come from the environment (a ``.env`` file is loaded by the CLI).
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from skillshelf.registry import BODY_FILE, DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "./skills"


def _env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to the default on bad values."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid integer for %s: %r, using %d", name, value, default)
        return default


def _env_paths(name: str, default: str) -> List[Path]:
    raw = os.getenv(name, "") or default
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


@dataclass
class Settings:
    roots: List[Path] = field(default_factory=lambda: [Path(DEFAULT_ROOT)])
    body_file: str = BODY_FILE
    max_depth: int = DEFAULT_MAX_DEPTH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SKILLSHELF_* environment variables."""
        return cls(
            roots=_env_paths("SKILLSHELF_ROOTS", DEFAULT_ROOT),
            body_file=os.getenv("SKILLSHELF_BODY_FILE", "").strip() or BODY_FILE,
            max_depth=_env_int("SKILLSHELF_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            log_level=os.getenv("SKILLSHELF_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
