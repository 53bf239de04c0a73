"""Dockerfile and docker-compose generators."""

from dockerizer.generators.compose import TopologyResult, build_compose, generate_compose
from dockerizer.generators.dockerfile import generate_dockerfile, render_dockerfile
from dockerizer.generators.output import GENERATED_FILES, clean_generated

__all__ = [
    "GENERATED_FILES",
    "TopologyResult",
    "build_compose",
    "clean_generated",
    "generate_compose",
    "generate_dockerfile",
    "render_dockerfile",
]
