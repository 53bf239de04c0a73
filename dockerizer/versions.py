"""Runtime version resolution: constraint parsing plus per-language lookups.

Each lookup checks the places a project pins its runtime (engine field,
lock file, runtime marker file, build config) and returns ``None`` when
nothing usable is found. :func:`resolve_version` then falls back to the
language's ``default_version`` from the catalog, so the generated base image
tag is always deterministic.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable

import structlog

from dockerizer.catalog import LanguageEntry
from dockerizer.exceptions import ManifestUnreadable
from dockerizer.manifests import read_manifest
from dockerizer.models import RawManifest

log = structlog.get_logger("dockerizer.versions")

# Range operators stripped from the front of a constraint, longest first
_OPERATORS = (">=", "<=", "==", "~=", "^", "~", "<", ">", "=", "!", "v")

# Separators between alternatives: "^8.1 || ^8.2", ">=3.9,<4", ">= 18 < 21"
_ALTERNATIVES_RE = re.compile(r"\|\||,|\s+")

_MAJOR_RE = re.compile(r"^\s*v?(\d+)\s*$")
_PYTHON_RUNTIME_RE = re.compile(r"python-(\d+\.\d+)")

# Build configs that pin the interpreter, checked in order whichever
# indicator file triggered detection
_PYTHON_BUILD_CONFIGS = ("pyproject.toml", "Pipfile")


def parse_version_constraint(constraint: str) -> str | None:
    """Reduce a version constraint to its ``major.minor`` prefix.

    ``"^18.2.0"`` -> ``"18.2"``, ``">=3.10,<4"`` -> ``"3.10"``,
    ``"3.11"`` -> ``"3.11"``. Constraints without two numeric dot-separated
    parts (``">=18"``, ``"8.x"``, ``"latest"``) return ``None``.
    """
    text = constraint.strip()
    stripped = True
    while stripped:
        stripped = False
        for op in _OPERATORS:
            if text.startswith(op):
                text = text[len(op) :].lstrip()
                stripped = True
                break

    first = _ALTERNATIVES_RE.split(text, maxsplit=1)[0] if text else ""
    parts = first.split(".")
    if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
        return f"{parts[0]}.{parts[1]}"
    return None


def parse_major_version(constraint: str) -> str | None:
    """Like :func:`parse_version_constraint` but accepts a bare major (``"17"``).

    Java releases are tagged by major only; ``"1.8"`` maps to ``"8"``.
    """
    match = _MAJOR_RE.match(constraint)
    if match:
        return match.group(1)
    version = parse_version_constraint(constraint)
    if version is None:
        return None
    major, minor = version.split(".")
    return minor if major == "1" else major


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None


def _read_json(path: Path) -> dict:
    text = _read(path)
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _dig(data: dict, *keys: str) -> object:
    """Follow nested object keys; ``None`` when a level is missing or not an object."""
    value: object = data
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _from_hints(manifest: RawManifest | None, *keys: str) -> str | None:
    if manifest is None:
        return None
    for key in keys:
        value = manifest.hints.get(key)
        if value:
            version = parse_version_constraint(value)
            if version:
                return version
    return None


def _from_marker_files(directory: Path, *names: str) -> str | None:
    for name in names:
        text = _read(directory / name)
        if text:
            version = parse_version_constraint(text.splitlines()[0])
            if version:
                return version
    return None


def _from_build_configs(
    directory: Path, manifest: RawManifest | None, *names: str
) -> str | None:
    """Read the ``engine`` hint of sibling manifests other than ``manifest``."""
    for name in names:
        if manifest is not None and manifest.path.name == name:
            continue
        if not (directory / name).is_file():
            continue
        try:
            sibling = read_manifest(directory, name)
        except ManifestUnreadable as e:
            log.debug("versions.build_config_unreadable", path=e.path, reason=e.reason)
            continue
        version = _from_hints(sibling, "engine")
        if version:
            return version
    return None


def node_version(directory: Path, manifest: RawManifest | None) -> str | None:
    return _from_hints(manifest, "engine") or _from_marker_files(
        directory, ".nvmrc", ".node-version"
    )


def python_version(directory: Path, manifest: RawManifest | None) -> str | None:
    version = (
        _from_hints(manifest, "engine")
        or _from_marker_files(directory, ".python-version")
        or _from_build_configs(directory, manifest, *_PYTHON_BUILD_CONFIGS)
    )
    if version:
        return version

    runtime = _read(directory / "runtime.txt")
    if runtime:
        match = _PYTHON_RUNTIME_RE.search(runtime)
        if match:
            return match.group(1)

    lock = _read_json(directory / "Pipfile.lock")
    pinned = _dig(lock, "_meta", "requires", "python_version")
    if isinstance(pinned, str):
        return parse_version_constraint(pinned)
    return None


def go_version(directory: Path, manifest: RawManifest | None) -> str | None:
    return _from_hints(manifest, "engine")


def php_version(directory: Path, manifest: RawManifest | None) -> str | None:
    version = _from_hints(manifest, "engine", "platform")
    if version:
        return version
    lock = _read_json(directory / "composer.lock")
    platform_php = _dig(lock, "platform", "php")
    if isinstance(platform_php, str):
        return parse_version_constraint(platform_php)
    return None


def java_version(directory: Path, manifest: RawManifest | None) -> str | None:
    if manifest is None:
        return None
    engine = manifest.hints.get("engine")
    return parse_major_version(engine) if engine else None


def ruby_version(directory: Path, manifest: RawManifest | None) -> str | None:
    version = _from_hints(manifest, "engine")
    if version:
        return version
    # rbenv and chruby accept "ruby-3.3.0" as well as "3.3.0"
    text = _read(directory / ".ruby-version")
    if text:
        return parse_version_constraint(text.splitlines()[0].removeprefix("ruby-"))
    return None


# Language name -> lookup. Languages without a lookup use their default.
VERSION_LOOKUPS: dict[str, Callable[[Path, RawManifest | None], str | None]] = {
    "Node.js": node_version,
    "Python": python_version,
    "Go": go_version,
    "PHP": php_version,
    "Java": java_version,
    "Ruby": ruby_version,
}


def resolve_version(
    entry: LanguageEntry,
    directory: str | Path,
    manifest: RawManifest | None = None,
) -> str:
    """Return the runtime version for ``entry``, falling back to its default."""
    lookup = VERSION_LOOKUPS.get(entry.name)
    version = lookup(Path(directory), manifest) if lookup else None
    if version:
        log.debug("versions.resolved", language=entry.name, version=version)
        return version
    log.debug("versions.default", language=entry.name, version=entry.default_version)
    return entry.default_version
