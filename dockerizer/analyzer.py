"""Project analysis: build a ProjectDescriptor from indicator and manifest files.

Languages are tried in catalog order; the first one with an indicator file
in the project directory is committed and no other language is considered.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from dockerizer.catalog import Catalog, FrameworkEntry, LanguageEntry, load_catalog
from dockerizer.classifier import classify
from dockerizer.exceptions import DockerizerError, ManifestUnreadable, ProjectNotFound
from dockerizer.manifests import read_manifest
from dockerizer.models import ProjectDescriptor, RawManifest, validate_port
from dockerizer.versions import resolve_version

log = structlog.get_logger("dockerizer.analyzer")


def find_indicator(directory: Path, entry: LanguageEntry) -> str | None:
    """Return the first of ``entry``'s indicator files present in ``directory``."""
    for indicator in entry.indicators:
        if (directory / indicator).is_file():
            return indicator
    return None


def _apply_framework(
    descriptor: ProjectDescriptor,
    language: LanguageEntry,
    name: str,
    framework: FrameworkEntry | None,
) -> None:
    descriptor.framework = name
    descriptor.environment = list(language.environment)
    descriptor.ports = []
    if framework is None:
        return
    descriptor.environment.extend(framework.environment)
    if framework.port:
        descriptor.ports = [str(framework.port)]


def analyze_project(
    path: str | Path = ".",
    catalog: Catalog | None = None,
) -> ProjectDescriptor:
    """Detect language, version, base image and framework of the project at ``path``.

    Returns an empty descriptor (``language == ""``) when no indicator file is
    present; callers then ask the user to classify the project. An unreadable
    manifest is not fatal: the error is recorded on the descriptor and the
    language defaults are kept.
    """
    root = Path(path)
    if not root.is_dir():
        raise ProjectNotFound(str(path))
    catalog = catalog or load_catalog()
    descriptor = ProjectDescriptor()

    for entry in catalog.languages:
        indicator = find_indicator(root, entry)
        if indicator is None:
            continue

        log.info("analyzer.language_detected", language=entry.name, indicator=indicator)
        descriptor.language = entry.name
        descriptor.manifest = indicator
        descriptor.version = entry.default_version
        descriptor.base_image = entry.default_image
        _apply_framework(descriptor, entry, "", None)

        manifest: RawManifest | None = None
        try:
            manifest = read_manifest(root, indicator)
        except ManifestUnreadable as e:
            log.warning("analyzer.manifest_unreadable", path=e.path, reason=e.reason)
            descriptor.manifest_error = str(e)

        descriptor.version = resolve_version(entry, root, manifest)
        descriptor.base_image = entry.image_for(descriptor.version)

        if manifest is not None:
            descriptor.dependencies = set(manifest.dependencies)
            match = classify(manifest.dependencies, entry.frameworks)
            if match is not None:
                _apply_framework(descriptor, entry, match.name, match.entry)
                log.info(
                    "analyzer.framework_detected",
                    language=entry.name,
                    framework=match.name,
                    marker=match.marker,
                )
            else:
                log.info("analyzer.no_framework", language=entry.name)
        break
    else:
        log.warning("analyzer.no_language", path=str(root))

    return descriptor


def apply_overrides(
    descriptor: ProjectDescriptor,
    catalog: Catalog,
    *,
    language: str | None = None,
    framework: str | None = None,
    port: str | int | None = None,
    database: str | None = None,
    database_port: str | int | None = None,
) -> ProjectDescriptor:
    """Apply user choices on top of a detected (or empty) descriptor.

    Switching language resets framework, ports and environment to that
    language's defaults; switching framework re-seeds the port. An explicit
    ``port`` is applied last so it always wins.
    """
    if language is not None and language != descriptor.language:
        entry = catalog.language(language)
        if entry is None:
            raise DockerizerError(
                f"Unknown language: {language}. Known: {', '.join(catalog.language_names())}"
            )
        descriptor.language = entry.name
        descriptor.version = entry.default_version
        descriptor.base_image = entry.default_image
        descriptor.manifest = entry.indicators[0] if entry.indicators else ""
        _apply_framework(descriptor, entry, "", None)
        log.info("analyzer.language_overridden", language=entry.name)

    if framework is not None and framework != descriptor.framework:
        entry = catalog.language(descriptor.language)
        if entry is None:
            raise DockerizerError("Choose a language before choosing a framework")
        if framework and framework not in entry.frameworks:
            raise DockerizerError(
                f"Unknown {entry.name} framework: {framework}. "
                f"Known: {', '.join(entry.frameworks)}"
            )
        _apply_framework(descriptor, entry, framework, entry.frameworks.get(framework))
        log.info("analyzer.framework_overridden", framework=framework)

    if port is not None:
        descriptor.set_primary_port(port)

    if database is not None:
        if database and catalog.database(database) is None:
            raise DockerizerError(
                f"Unknown database: {database}. Known: {', '.join(catalog.databases)}"
            )
        framework_entry = catalog.framework(descriptor.language, descriptor.framework)
        allowed = framework_entry.databases if framework_entry else []
        if database and allowed and database not in allowed:
            raise DockerizerError(
                f"Database {database} is not supported with {descriptor.framework}. "
                f"Supported: {', '.join(allowed)}"
            )
        descriptor.database = database

    if database_port is not None:
        descriptor.database_port = validate_port(database_port)

    return descriptor
