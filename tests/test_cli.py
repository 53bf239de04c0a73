"""Tests for CLI commands, CliRunner over temporary project directories."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from click.testing import CliRunner

from dockerizer.cli import main
from dockerizer.core.config import PACKAGED_CATALOG_DIR

# ── analyze ──


class TestAnalyze:
    def test_human_readable(self, make_project):
        root = make_project({"go.mod": "module x\n\ngo 1.21\n"})
        result = CliRunner().invoke(main, ["analyze", "--source", str(root)])
        assert result.exit_code == 0, result.output
        assert "Language: Go 1.21" in result.output
        assert "Base image: golang:1.21-alpine" in result.output
        assert "Framework: (not detected)" in result.output

    def test_json(self, make_project):
        root = make_project({"package.json": json.dumps({"dependencies": {"react": "^18.2"}})})
        result = CliRunner().invoke(main, ["analyze", "-s", str(root), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["language"] == "Node.js"
        assert data["framework"] == "react"
        assert data["ports"] == ["3000"]
        assert data["dependencies"] == ["react"]

    def test_undetected(self, make_project):
        root = make_project({"README.md": ""})
        result = CliRunner().invoke(main, ["analyze", "-s", str(root)])
        assert result.exit_code == 0
        assert "Language: (not detected)" in result.output

    def test_unreadable_manifest_exits_1(self, make_project):
        root = make_project({"composer.json": "{"})
        result = CliRunner().invoke(main, ["analyze", "-s", str(root)])
        assert result.exit_code == 1
        assert "composer.json" in result.output

    def test_missing_source(self, tmp_path: Path):
        result = CliRunner().invoke(main, ["analyze", "-s", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Project path not found" in result.output


# ── generate ──


class TestGenerate:
    def test_go_project(self, make_project):
        root = make_project({"go.mod": "module x\n\ngo 1.21\n"})
        result = CliRunner().invoke(main, ["generate", "-s", str(root)])
        assert result.exit_code == 0, result.output
        assert (root / "Dockerfile").is_file()
        assert (root / "docker-compose.yml").is_file()
        assert "EXPOSE" not in (root / "Dockerfile").read_text()

    def test_output_directory(self, make_project, tmp_path: Path):
        root = make_project({"requirements.txt": "flask\n"})
        out = tmp_path / "out"
        result = CliRunner().invoke(main, ["generate", "-s", str(root), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "EXPOSE 5000" in (out / "Dockerfile").read_text()
        assert not (root / "Dockerfile").exists()

    def test_overrides(self, make_project):
        root = make_project({"README.md": ""})
        result = CliRunner().invoke(
            main,
            [
                "generate",
                "-s", str(root),
                "--language", "Python",
                "--framework", "django",
                "--port", "9000",
                "--database", "mysql",
                "--database-port", "3307",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "EXPOSE 9000" in (root / "Dockerfile").read_text()
        compose = (root / "docker-compose.yml").read_text()
        assert "3307:3306" in compose
        assert "mysql:8.0" in compose

    def test_undetected_without_language(self, make_project):
        root = make_project({"README.md": ""})
        result = CliRunner().invoke(main, ["generate", "-s", str(root)])
        assert result.exit_code == 1
        assert "--language" in result.output
        assert not (root / "Dockerfile").exists()

    def test_invalid_port(self, make_project):
        root = make_project({"go.mod": "module x\n"})
        result = CliRunner().invoke(main, ["generate", "-s", str(root), "--port", "70000"])
        assert result.exit_code == 1
        assert "between 1 and 65535" in result.output

    def test_unknown_framework(self, make_project):
        root = make_project({"go.mod": "module x\n"})
        result = CliRunner().invoke(main, ["generate", "-s", str(root), "--framework", "rails"])
        assert result.exit_code == 1
        assert "Unknown Go framework" in result.output

    def test_database_outside_framework_choices(self, make_project):
        root = make_project({"requirements.txt": "django\n"})
        result = CliRunner().invoke(
            main, ["generate", "-s", str(root), "--database", "mongodb"]
        )
        assert result.exit_code == 1
        assert "not supported with django" in result.output
        assert not (root / "Dockerfile").exists()

    def test_recipe_failure_still_writes_compose(self, make_project):
        root = make_project(
            {"composer.json": json.dumps({"require": {"symfony/framework-bundle": "^7.0"}})}
        )
        result = CliRunner().invoke(main, ["generate", "-s", str(root)])
        assert result.exit_code == 1
        assert "symfony" in result.output
        assert not (root / "Dockerfile").exists()
        assert (root / "docker-compose.yml").is_file()

    def test_unreadable_manifest_exits_1(self, make_project):
        root = make_project({"package.json": "{"})
        result = CliRunner().invoke(main, ["generate", "-s", str(root)])
        assert result.exit_code == 1
        assert "package.json" in result.output
        assert not (root / "Dockerfile").exists()

    def test_dropped_database_warning(self, make_project):
        root = make_project({"go.mod": "module x\n\nrequire github.com/gin-gonic/gin v1.9.1\n"})
        result = CliRunner().invoke(
            main, ["generate", "-s", str(root), "--database", "postgres"]
        )
        assert result.exit_code == 0, result.output
        assert "Warning:" in result.output
        assert "postgres" not in (root / "docker-compose.yml").read_text()


# ── init ──


class TestInit:
    def test_accept_detection(self, make_project):
        root = make_project({"requirements.txt": "flask==3.0\n"})
        # language ok, framework ok, keep port, default engine, keep db port
        answers = "y\ny\nn\n\nn\n"
        result = CliRunner().invoke(main, ["init", "-s", str(root)], input=answers)
        assert result.exit_code == 0, result.output
        assert "Detected Python project" in result.output
        assert "Detected flask framework" in result.output
        assert "flask projects get a database service; choose its engine." in result.output
        assert "Successfully generated Docker files!" in result.output
        assert "postgres:13-alpine" in (root / "docker-compose.yml").read_text()

    def test_manual_selection(self, make_project):
        root = make_project({"README.md": ""})
        # language, framework, custom port yes, port
        answers = "Ruby\nsinatra\ny\n4000\n"
        result = CliRunner().invoke(main, ["init", "-s", str(root)], input=answers)
        assert result.exit_code == 0, result.output
        assert "Could not automatically detect the project language." in result.output
        dockerfile = (root / "Dockerfile").read_text()
        assert "FROM ruby:3.2-alpine AS builder" in dockerfile
        assert "EXPOSE 4000" in dockerfile
        assert "No database service is generated for sinatra projects." in result.output
        assert "postgres" not in (root / "docker-compose.yml").read_text()

    def test_reject_detected_framework(self, make_project):
        root = make_project({"package.json": json.dumps({"dependencies": {"express": "^4"}})})
        # language ok, framework wrong -> nestjs, keep port, postgres, db port 6000
        answers = "y\nn\nnestjs\nn\npostgres\ny\n6000\n"
        result = CliRunner().invoke(main, ["init", "-s", str(root)], input=answers)
        assert result.exit_code == 0, result.output
        compose = (root / "docker-compose.yml").read_text()
        assert "6000:5432" in compose
        assert "redis" in compose
        assert '"dist/main.js"' in (root / "Dockerfile").read_text()

    def test_unreadable_manifest_warns_and_continues(self, make_project):
        root = make_project({"pom.xml": "<project>"})
        # language ok, framework, keep port
        answers = "y\nspring-boot\nn\n"
        result = CliRunner().invoke(main, ["init", "-s", str(root)], input=answers)
        assert result.exit_code == 0, result.output
        assert "Warning: Cannot read manifest" in result.output
        assert "EXPOSE 8080" in (root / "Dockerfile").read_text()


# ── clean / supported / globals ──


class TestClean:
    def test_clean_after_generate(self, make_project):
        root = make_project({"composer.json": json.dumps({"require": {"laravel/framework": "^11"}})})
        runner = CliRunner()
        assert runner.invoke(main, ["generate", "-s", str(root)]).exit_code == 0
        assert (root / "docker" / "nginx" / "conf.d" / "default.conf").is_file()

        result = runner.invoke(main, ["clean", "-o", str(root)])
        assert result.exit_code == 0, result.output
        assert not (root / "Dockerfile").exists()
        assert not (root / "docker").exists()
        assert (root / "composer.json").exists()

        again = runner.invoke(main, ["clean", "-o", str(root)])
        assert again.exit_code == 0
        assert "Nothing to clean." in again.output


class TestSupported:
    def test_lists_catalog(self):
        result = CliRunner().invoke(main, ["supported"])
        assert result.exit_code == 0, result.output
        assert "Node.js (package.json; default node:18-alpine)" in result.output
        assert "  laravel :8000" in result.output
        assert "  postgres (postgres:13-alpine, port 5432)" in result.output


class TestGlobalOptions:
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_custom_catalog(self, tmp_path: Path, make_project):
        catalog_dir = tmp_path / "catalogs"
        shutil.copytree(PACKAGED_CATALOG_DIR, catalog_dir)
        languages = catalog_dir / "languages.yaml"
        text = languages.read_text().replace('default_version: "1.21"', 'default_version: "1.20"')
        languages.write_text(text)

        root = make_project({"go.mod": "module x\n"})
        result = CliRunner().invoke(
            main, ["--catalog", str(catalog_dir), "analyze", "-s", str(root)]
        )
        assert result.exit_code == 0, result.output
        assert "golang:1.20-alpine" in result.output

    def test_broken_catalog(self, tmp_path: Path):
        result = CliRunner().invoke(main, ["--catalog", str(tmp_path), "supported"])
        assert result.exit_code == 1
        assert "Catalog file not found" in result.output
