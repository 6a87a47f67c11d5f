"""Tests for the skillshelf command line."""

import json
import logging

import pytest

from skillshelf.cli import EXIT_LOOKUP, EXIT_OK, EXIT_USAGE, main, resolve_level
from skillshelf.errors import ReadError
from skillshelf.loader import UnitLoader


class TestCommands:

    def test_list(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "list"]) == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "ai-coding-principles\t1.2.0\tCoding principles for AI assistants.",
            "react-patterns\t2.0\tReact component patterns.",
        ]

    def test_list_json(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "list", "--json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert [d["slug"] for d in data] == ["ai-coding-principles", "react-patterns"]

    def test_list_uses_env_roots(self, skills_root, capsys, monkeypatch):
        monkeypatch.setenv("SKILLSHELF_ROOTS", str(skills_root))
        assert main(["list"]) == EXIT_OK
        assert "react-patterns" in capsys.readouterr().out

    def test_show_body(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "show", "react-patterns"]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("---\nname: react-patterns")

    def test_show_strip_header(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "show", "react-patterns", "--strip-header"]) == EXIT_OK
        assert capsys.readouterr().out.startswith("# react-patterns")

    def test_show_attachment_section(self, skills_root, capsys):
        code = main(["--root", str(skills_root), "show", "ai-coding-principles",
                     "references/glossary.md", "--section", "Terms"])
        assert code == EXIT_OK
        assert capsys.readouterr().out == "## Terms\n- skill\n"

    def test_show_missing_section(self, skills_root, capsys):
        code = main(["--root", str(skills_root), "show", "react-patterns", "--section", "Nope"])
        assert code == EXIT_LOOKUP
        assert "not found" in capsys.readouterr().err

    def test_files(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "files", "ai-coding-principles"]) == EXIT_OK
        assert capsys.readouterr().out.splitlines() == [
            "metadata.json",
            "references/glossary.md",
            "rules/error-never-swallow.md",
        ]

    def test_catalog(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "catalog"]) == EXIT_OK
        assert "## Available skills" in capsys.readouterr().out

    def test_discover(self, tmp_path, make_skill, capsys):
        make_skill(tmp_path / "skills" / "skills", "nested")
        assert main(["--discover", str(tmp_path), "list"]) == EXIT_OK
        assert capsys.readouterr().out.startswith("nested\t")


class TestExitCodes:

    def test_unknown_slug(self, skills_root, capsys):
        assert main(["--root", str(skills_root), "show", "nonexistent-skill"]) == EXIT_LOOKUP
        assert capsys.readouterr().out == ""

    def test_unknown_attachment(self, skills_root):
        code = main(["--root", str(skills_root), "show", "ai-coding-principles", "../../etc/passwd"])
        assert code == EXIT_LOOKUP

    def test_read_error(self, skills_root, monkeypatch):
        def fail(self, unit, relpath):
            raise ReadError(unit.slug, relpath, "Permission denied")

        monkeypatch.setattr(UnitLoader, "_read", fail)
        code = main(["--root", str(skills_root), "show", "ai-coding-principles",
                     "rules/error-never-swallow.md"])
        assert code == EXIT_LOOKUP

    def test_duplicate_slug(self, tmp_path, make_skill):
        make_skill(tmp_path / "a", "alpha")
        make_skill(tmp_path / "b", "alpha")
        code = main(["--root", str(tmp_path / "a"), "--root", str(tmp_path / "b"), "list"])
        assert code == EXIT_USAGE

    def test_missing_command(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2


class TestLogLevel:

    def test_known_names(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("WARNING") == logging.WARNING

    def test_unknown_names_fall_back_to_info(self):
        assert resolve_level("BASIC_FORMAT") == logging.INFO
        assert resolve_level("loud") == logging.INFO

    def test_main_with_odd_level(self, skills_root, monkeypatch):
        monkeypatch.setenv("SKILLSHELF_LOG_LEVEL", "BASIC_FORMAT")
        assert main(["--root", str(skills_root), "list"]) == EXIT_OK
