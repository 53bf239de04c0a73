"""Tests for version constraint parsing and per-language version lookups."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dockerizer.models import RawManifest
from dockerizer.versions import (
    VERSION_LOOKUPS,
    parse_major_version,
    parse_version_constraint,
    resolve_version,
)


def _manifest(**hints: str) -> RawManifest:
    return RawManifest(path=Path("manifest"), hints=dict(hints))


class TestParseVersionConstraint:
    @pytest.mark.parametrize(
        ("constraint", "expected"),
        [
            ("^18.2.0", "18.2"),
            (">=3.10,<4", "3.10"),
            ("~> 3.1", "3.1"),
            ("~=3.11.2", "3.11"),
            ("v20.11.1", "20.11"),
            ("^8.1 || ^8.2", "8.1"),
            ("==3.12.*", "3.12"),
            ("1.21", "1.21"),
            ("  1.22.3  ", "1.22"),
        ],
    )
    def test_reduces_to_major_minor(self, constraint: str, expected: str):
        assert parse_version_constraint(constraint) == expected

    @pytest.mark.parametrize("constraint", ["", ">=18", "8.x", "latest", "lts/*", "*"])
    def test_unusable_constraints(self, constraint: str):
        assert parse_version_constraint(constraint) is None

    @pytest.mark.parametrize("version", ["18.2", "3.9", "1.21", "8.3"])
    def test_idempotent(self, version: str):
        once = parse_version_constraint(version)
        assert once == version
        assert parse_version_constraint(once) == once


class TestParseMajorVersion:
    def test_bare_major(self):
        assert parse_major_version("17") == "17"

    def test_legacy_java_numbering(self):
        assert parse_major_version("1.8") == "8"

    def test_major_minor(self):
        assert parse_major_version("21.0.2") == "21"

    def test_garbage(self):
        assert parse_major_version("latest") is None


class TestLanguageLookups:
    def test_all_languages_have_lookups(self):
        assert set(VERSION_LOOKUPS) == {"Node.js", "Python", "Go", "PHP", "Java", "Ruby"}

    def test_node_engine_field(self, tmp_path: Path):
        assert VERSION_LOOKUPS["Node.js"](tmp_path, _manifest(engine=">=20.9.0")) == "20.9"

    def test_node_nvmrc(self, tmp_path: Path):
        (tmp_path / ".nvmrc").write_text("v21.6.1\n")
        assert VERSION_LOOKUPS["Node.js"](tmp_path, _manifest()) == "21.6"

    def test_node_engine_without_minor_falls_through_to_nvmrc(self, tmp_path: Path):
        (tmp_path / ".nvmrc").write_text("20.10\n")
        assert VERSION_LOOKUPS["Node.js"](tmp_path, _manifest(engine=">=18")) == "20.10"

    def test_python_version_file(self, tmp_path: Path):
        (tmp_path / ".python-version").write_text("3.11.4\n")
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.11"

    def test_python_runtime_txt(self, tmp_path: Path):
        (tmp_path / "runtime.txt").write_text("python-3.10.13\n")
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.10"

    def test_python_pipfile_lock(self, tmp_path: Path):
        lock = {"_meta": {"requires": {"python_version": "3.12"}}}
        (tmp_path / "Pipfile.lock").write_text(json.dumps(lock))
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.12"

    def test_python_engine_beats_marker_file(self, tmp_path: Path):
        (tmp_path / ".python-version").write_text("3.8\n")
        assert VERSION_LOOKUPS["Python"](tmp_path, _manifest(engine=">=3.11")) == "3.11"

    def test_python_pipfile_beside_other_indicator(self, tmp_path: Path):
        (tmp_path / "Pipfile").write_text('[requires]\npython_version = "3.11"\n')
        requirements = RawManifest(path=tmp_path / "requirements.txt")
        assert VERSION_LOOKUPS["Python"](tmp_path, requirements) == "3.11"

    def test_python_pyproject_before_pipfile(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            '[tool.poetry.dependencies]\npython = "^3.10"\n'
        )
        (tmp_path / "Pipfile").write_text('[requires]\npython_version = "3.11"\n')
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.10"

    def test_python_build_config_beats_runtime_txt(self, tmp_path: Path):
        (tmp_path / "runtime.txt").write_text("python-3.8.18\n")
        (tmp_path / "pyproject.toml").write_text('[project]\nrequires-python = ">=3.12"\n')
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.12"

    def test_python_committed_indicator_not_reread(self, tmp_path: Path):
        # The committed pyproject.toml carries no pin, so the Pipfile decides
        (tmp_path / "pyproject.toml").write_text('[project]\nrequires-python = ">=3.12"\n')
        (tmp_path / "Pipfile").write_text('[requires]\npython_version = "3.11"\n')
        pyproject = RawManifest(path=tmp_path / "pyproject.toml")
        assert VERSION_LOOKUPS["Python"](tmp_path, pyproject) == "3.11"

    def test_python_unreadable_build_config_skipped(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('project = "x"\n')
        (tmp_path / "Pipfile").write_text("[requires\n")
        (tmp_path / "runtime.txt").write_text("python-3.10.13\n")
        assert VERSION_LOOKUPS["Python"](tmp_path, None) == "3.10"

    def test_python_misshapen_pipfile_lock_ignored(self, tmp_path: Path):
        (tmp_path / "Pipfile.lock").write_text(json.dumps({"_meta": ["requires"]}))
        assert VERSION_LOOKUPS["Python"](tmp_path, None) is None

    def test_go_directive(self, tmp_path: Path):
        assert VERSION_LOOKUPS["Go"](tmp_path, _manifest(engine="1.22.1")) == "1.22"

    def test_php_platform_hint(self, tmp_path: Path):
        assert VERSION_LOOKUPS["PHP"](tmp_path, _manifest(platform="8.1.0")) == "8.1"

    def test_php_composer_lock(self, tmp_path: Path):
        (tmp_path / "composer.lock").write_text(json.dumps({"platform": {"php": "^8.2"}}))
        assert VERSION_LOOKUPS["PHP"](tmp_path, _manifest()) == "8.2"

    def test_php_malformed_lock_ignored(self, tmp_path: Path):
        (tmp_path / "composer.lock").write_text("{broken")
        assert VERSION_LOOKUPS["PHP"](tmp_path, _manifest()) is None

    def test_php_lock_with_empty_platform_list(self, tmp_path: Path):
        (tmp_path / "composer.lock").write_text(json.dumps({"platform": []}))
        assert VERSION_LOOKUPS["PHP"](tmp_path, _manifest()) is None

    def test_java_major_only(self, tmp_path: Path):
        assert VERSION_LOOKUPS["Java"](tmp_path, _manifest(engine="21")) == "21"

    def test_ruby_version_file(self, tmp_path: Path):
        (tmp_path / ".ruby-version").write_text("3.3.0\n")
        assert VERSION_LOOKUPS["Ruby"](tmp_path, _manifest()) == "3.3"

    def test_ruby_version_file_with_prefix(self, tmp_path: Path):
        (tmp_path / ".ruby-version").write_text("ruby-3.1.4\n")
        assert VERSION_LOOKUPS["Ruby"](tmp_path, _manifest()) == "3.1"


class TestResolveVersion:
    def test_found_version(self, catalog, tmp_path: Path):
        entry = catalog.language("Go")
        assert resolve_version(entry, tmp_path, _manifest(engine="1.22")) == "1.22"

    @pytest.mark.parametrize(
        ("language", "default"),
        [
            ("Node.js", "18"),
            ("Python", "3.9"),
            ("Go", "1.21"),
            ("PHP", "8.3"),
            ("Java", "17"),
            ("Ruby", "3.2"),
        ],
    )
    def test_defaults(self, catalog, tmp_path: Path, language: str, default: str):
        entry = catalog.language(language)
        assert resolve_version(entry, tmp_path, None) == default

    def test_malformed_constraint_uses_default(self, catalog, tmp_path: Path):
        entry = catalog.language("Node.js")
        assert resolve_version(entry, tmp_path, _manifest(engine="lts/*")) == "18"
