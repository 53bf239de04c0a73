"""Reader for Python pyproject.toml (PEP 621 and Poetry) and Pipfile."""

from __future__ import annotations

import re
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dockerizer.exceptions import ManifestUnreadable
from dockerizer.manifests.registry import register_reader
from dockerizer.manifests.requirements_txt import normalize_name
from dockerizer.models import RawManifest

# PEP 508 simplified: the distribution name at the start of the string
_PEP508_NAME_RE = re.compile(r"^\s*([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)")


def _load_toml(file_path: Path, content: str) -> dict:
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestUnreadable(str(file_path), f"invalid TOML: {e}") from e


def _table(file_path: Path, data: dict, *keys: str) -> dict:
    """Walk nested tables along ``keys``; a missing key yields an empty table."""
    table = data
    for depth, key in enumerate(keys, start=1):
        value = table.get(key, {})
        if not isinstance(value, dict):
            name = ".".join(keys[:depth])
            raise ManifestUnreadable(str(file_path), f"[{name}] must be a table")
        table = value
    return table


class PyprojectTomlReader:
    ecosystem = "pyproject"
    indicators = ["pyproject.toml"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        data = _load_toml(file_path, content)
        manifest = RawManifest(path=file_path)

        project = _table(file_path, data, "project")
        dependencies = project.get("dependencies", [])
        if not isinstance(dependencies, list):
            raise ManifestUnreadable(str(file_path), "project.dependencies must be an array")
        for raw in dependencies:
            m = _PEP508_NAME_RE.match(raw) if isinstance(raw, str) else None
            if m:
                manifest.dependencies.add(normalize_name(m.group(1)))
        if isinstance(project.get("requires-python"), str):
            manifest.hints["engine"] = project["requires-python"]

        # Poetry keeps dependencies as a table with "python" as the interpreter pin
        poetry_deps = _table(file_path, data, "tool", "poetry", "dependencies")
        for name, constraint in poetry_deps.items():
            if name.lower() == "python":
                if isinstance(constraint, str):
                    manifest.hints.setdefault("engine", constraint)
                continue
            manifest.dependencies.add(normalize_name(name))

        return manifest


class PipfileReader:
    ecosystem = "pipenv"
    indicators = ["Pipfile"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        data = _load_toml(file_path, content)
        manifest = RawManifest(path=file_path)

        for section in ("packages", "dev-packages"):
            for name in _table(file_path, data, section):
                manifest.dependencies.add(normalize_name(name))

        python_version = _table(file_path, data, "requires").get("python_version")
        if isinstance(python_version, str):
            manifest.hints["engine"] = python_version
        return manifest


register_reader(PyprojectTomlReader())
register_reader(PipfileReader())
