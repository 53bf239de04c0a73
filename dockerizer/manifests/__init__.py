"""Manifest readers — auto-registered on import."""

from dockerizer.manifests import (
    composer_json,  # noqa: F401
    gemfile,  # noqa: F401
    go_mod,  # noqa: F401
    gradle_build,  # noqa: F401
    maven_pom,  # noqa: F401
    package_json,  # noqa: F401
    pyproject_toml,  # noqa: F401
    requirements_txt,  # noqa: F401
)
from dockerizer.manifests.registry import READER_REGISTRY, read_manifest, register_reader

__all__ = ["READER_REGISTRY", "read_manifest", "register_reader"]
