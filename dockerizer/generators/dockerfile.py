"""Dockerfile generation — multi-stage Jinja2 recipes selected by language and framework."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import structlog
from jinja2 import Environment, PackageLoader, StrictUndefined

from dockerizer.catalog import Catalog, load_catalog
from dockerizer.exceptions import EmptyRenderOutput, UnsupportedFramework, UnsupportedLanguage
from dockerizer.generators.output import DOCKERFILE, write_output
from dockerizer.models import ProjectDescriptor

log = structlog.get_logger("dockerizer.dockerfile")


@dataclass(frozen=True)
class RecipeShape:
    """Two-stage recipe for one language."""

    template: str
    default_start_command: tuple[str, ...]
    required_frameworks: tuple[str, ...] = ()  # empty = any framework, or none


RECIPES: dict[str, RecipeShape] = {
    "Node.js": RecipeShape("node.Dockerfile.j2", ("node", "index.js")),
    "Python": RecipeShape("python.Dockerfile.j2", ("python", "app.py")),
    "Go": RecipeShape("go.Dockerfile.j2", ("./main",)),
    "PHP": RecipeShape("php.Dockerfile.j2", ("php-fpm",), required_frameworks=("laravel",)),
    "Java": RecipeShape("java.Dockerfile.j2", ("java", "-jar", "app.jar")),
    "Ruby": RecipeShape("ruby.Dockerfile.j2", ("ruby", "app.rb")),
}


def _exec_form(command: list[str] | tuple[str, ...]) -> str:
    return json.dumps(list(command))


_env = Environment(
    loader=PackageLoader("dockerizer", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
    autoescape=False,
)
_env.filters["exec_form"] = _exec_form


def select_recipe(language: str, framework: str) -> RecipeShape:
    """Return the recipe shape for ``(language, framework)`` or raise."""
    shape = RECIPES.get(language)
    if shape is None:
        raise UnsupportedLanguage(language)
    if shape.required_frameworks and framework not in shape.required_frameworks:
        raise UnsupportedFramework(language, framework, list(shape.required_frameworks))
    return shape


def render_dockerfile(descriptor: ProjectDescriptor, catalog: Catalog | None = None) -> str:
    """Render the Dockerfile text for ``descriptor``. Same input, same bytes."""
    shape = select_recipe(descriptor.language, descriptor.framework)
    catalog = catalog or load_catalog()
    language = catalog.language(descriptor.language)
    framework = catalog.framework(descriptor.language, descriptor.framework)

    port = descriptor.primary_port or (str(framework.port) if framework and framework.port else "")
    if framework and framework.start_command:
        start_command = [part.replace("{port}", port) for part in framework.start_command]
    else:
        start_command = list(shape.default_start_command)

    version = descriptor.version or (language.default_version if language else "")
    base_image = descriptor.base_image or (language.image_for(version) if language else "")

    template = _env.get_template(shape.template)
    return template.render(
        language=descriptor.language,
        framework=descriptor.framework,
        manifest=descriptor.manifest,
        base_image=base_image,
        version=version,
        ports=list(descriptor.ports),
        primary_port=port,
        environment=list(descriptor.environment),
        build_command=framework.build_command if framework else None,
        start_command=start_command,
    )


def generate_dockerfile(
    descriptor: ProjectDescriptor,
    output_dir: str | Path = ".",
    catalog: Catalog | None = None,
) -> Path:
    """Render and write ``Dockerfile`` into ``output_dir``.

    Nothing is written when rendering fails or produces an empty recipe.
    """
    path = Path(output_dir) / DOCKERFILE
    content = render_dockerfile(descriptor, catalog)
    if not content.strip():
        raise EmptyRenderOutput(str(path), descriptor.language, descriptor.framework)

    write_output(path, content)
    log.info(
        "dockerfile.written",
        path=str(path),
        language=descriptor.language,
        framework=descriptor.framework or None,
    )
    return path
