"""Shared pytest fixtures for skillshelf tests."""

import pytest


SAMPLE_BODY = """\
# {name}

## Overview
Principles for writing code with an assistant.

## Rules
- Never swallow errors.
- Keep functions small.

## Changelog
- v1.0: initial
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ensure SKILLSHELF_* settings from the host never leak into tests."""
    for name in ("SKILLSHELF_ROOTS", "SKILLSHELF_BODY_FILE",
                 "SKILLSHELF_MAX_DEPTH", "SKILLSHELF_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_skill():
    """Return a helper that writes a skill directory under a root."""

    def _make(root, slug, name=None, description="A sample skill.", extra_header="",
              body=None, files=None):
        skill_dir = root / slug
        skill_dir.mkdir(parents=True, exist_ok=True)
        header = f"name: {name or slug}\n"
        if description is not None:
            header += f'description: "{description}"\n'
        header += extra_header
        text = f"---\n{header}---\n\n" + (body if body is not None else SAMPLE_BODY.format(name=name or slug))
        (skill_dir / "SKILL.md").write_text(text, encoding="utf-8")
        for relpath, content in (files or {}).items():
            target = skill_dir / relpath
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return skill_dir

    return _make


@pytest.fixture
def skills_root(tmp_path, make_skill):
    """A small corpus: two valid skills and one directory without SKILL.md."""
    root = tmp_path / "skills"
    make_skill(
        root,
        "ai-coding-principles",
        description="Coding principles for AI assistants.",
        extra_header="license: MIT\n",
        files={
            "rules/error-never-swallow.md": "# Never swallow errors\n\nRe-raise or log.\n",
            "references/glossary.md": "# Glossary\n\n## Terms\n- skill\n",
            "metadata.json": '{"version": "1.2.0", "author": "docs"}',
        },
    )
    make_skill(root, "react-patterns", description="React component patterns.",
               extra_header='version: "2.0"\n')
    (root / "drafts").mkdir()
    (root / "drafts" / "notes.md").write_text("not a skill", encoding="utf-8")
    return root
