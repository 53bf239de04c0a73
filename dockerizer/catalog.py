"""Language, framework and database catalog, as user-editable YAML validated with pydantic."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from dockerizer.core.config import Settings
from dockerizer.exceptions import CatalogError

log = structlog.get_logger("dockerizer.catalog")

LANGUAGES_FILE = "languages.yaml"
DATABASES_FILE = "databases.yaml"


class FrameworkEntry(BaseModel):
    markers: list[str]
    port: int = Field(default=0, ge=0, le=65535)  # 0 = no default port
    build_command: str | None = None
    start_command: list[str] = Field(default_factory=list)  # "{port}" -> primary port
    databases: list[str] = Field(default_factory=list)
    environment: list[str] = Field(default_factory=list)

    @field_validator("markers")
    @classmethod
    def _markers_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("a framework needs at least one dependency marker")
        return v


class LanguageEntry(BaseModel):
    name: str
    indicators: list[str]
    image: str  # e.g. "node:{version}-alpine"
    default_version: str
    frameworks: dict[str, FrameworkEntry] = Field(default_factory=dict)
    environment: list[str] = Field(default_factory=list)

    @field_validator("image")
    @classmethod
    def _image_has_version(cls, v: str) -> str:
        if "{version}" not in v:
            raise ValueError("image must contain a '{version}' placeholder")
        return v

    @property
    def default_image(self) -> str:
        return self.image_for(self.default_version)

    def image_for(self, version: str) -> str:
        return self.image.format(version=version)


class DatabaseEntry(BaseModel):
    name: str
    image: str
    port: int = Field(ge=1, le=65535)
    data_path: str
    environment: list[str] = Field(default_factory=list)
    healthcheck: list[str]


class Catalog(BaseModel):
    languages: list[LanguageEntry]
    databases: dict[str, DatabaseEntry] = Field(default_factory=dict)
    caches: dict[str, DatabaseEntry] = Field(default_factory=dict)

    def language(self, name: str) -> LanguageEntry | None:
        for entry in self.languages:
            if entry.name == name:
                return entry
        return None

    def framework(self, language: str, name: str) -> FrameworkEntry | None:
        entry = self.language(language)
        if entry is None:
            return None
        return entry.frameworks.get(name)

    def database(self, kind: str) -> DatabaseEntry | None:
        return self.databases.get(kind)

    def language_names(self) -> list[str]:
        return [entry.name for entry in self.languages]


def _read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogError(f"Catalog file not found: {path}") from None
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain a mapping")
    return data


def load_catalog(directory: str | Path | None = None) -> Catalog:
    """Load ``languages.yaml`` and ``databases.yaml`` from ``directory``.

    Defaults to ``DOCKERIZER_CATALOG_DIR`` or the catalogs shipped with the
    package.
    """
    root = Path(directory) if directory else Settings.from_env().catalog_dir
    languages = _read_yaml(root / LANGUAGES_FILE)
    databases = _read_yaml(root / DATABASES_FILE)

    try:
        catalog = Catalog(
            languages=languages.get("languages") or [],
            databases=databases.get("databases") or {},
            caches=databases.get("caches") or {},
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog in {root}: {e}") from e

    log.debug(
        "catalog.loaded",
        directory=str(root),
        languages=catalog.language_names(),
        databases=list(catalog.databases),
    )
    return catalog
