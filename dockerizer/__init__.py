"""dockerizer: detect a project's stack and generate Docker build and compose files."""

__version__ = "0.1.0"

from dockerizer.analyzer import analyze_project, apply_overrides
from dockerizer.catalog import Catalog, load_catalog
from dockerizer.generators import (
    build_compose,
    clean_generated,
    generate_compose,
    generate_dockerfile,
    render_dockerfile,
)
from dockerizer.models import ProjectDescriptor

__all__ = [
    "Catalog",
    "ProjectDescriptor",
    "analyze_project",
    "apply_overrides",
    "build_compose",
    "clean_generated",
    "generate_compose",
    "generate_dockerfile",
    "load_catalog",
    "render_dockerfile",
]
