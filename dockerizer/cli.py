"""CLI entry point: dockerize.

Subcommands:
    dockerize analyze [--json]       # Print what was detected in the project
    dockerize generate [overrides]   # Write Dockerfile and docker-compose.yml
    dockerize init                   # Interactive detection review, then generate
    dockerize clean                  # Remove generated files
    dockerize supported              # List catalog languages and frameworks
"""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click
import structlog

from dockerizer import __version__
from dockerizer.analyzer import analyze_project, apply_overrides
from dockerizer.catalog import Catalog, load_catalog
from dockerizer.core.logging import setup_logging
from dockerizer.exceptions import DockerizerError
from dockerizer.generators import clean_generated, generate_compose, generate_dockerfile
from dockerizer.generators.compose import FRAMEWORK_DATABASES
from dockerizer.models import ProjectDescriptor

log = structlog.get_logger("dockerizer.cli")

_NO_FRAMEWORK = "none"

_source_option = click.option(
    "-s", "--source", default=".", type=click.Path(file_okay=False), help="Project directory"
)
_output_option = click.option(
    "-o", "--output", default=None, help="Output directory (default: source)"
)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_catalog(ctx: click.Context) -> Catalog:
    try:
        return load_catalog(ctx.obj.get("catalog_dir"))
    except DockerizerError as e:
        _fail(str(e))


def _analyze(source: str, catalog: Catalog) -> ProjectDescriptor:
    try:
        return analyze_project(source, catalog)
    except DockerizerError as e:
        _fail(str(e))


def _print_descriptor(descriptor: ProjectDescriptor) -> None:
    if not descriptor.detected:
        click.echo("Language: (not detected)")
        return
    click.echo(f"Language: {descriptor.language} {descriptor.version}")
    click.echo(f"Manifest: {descriptor.manifest}")
    click.echo(f"Base image: {descriptor.base_image}")
    click.echo(f"Framework: {descriptor.framework or '(not detected)'}")
    click.echo(f"Ports: {', '.join(descriptor.ports) or '(none)'}")
    if descriptor.environment:
        click.echo("Environment:")
        for item in descriptor.environment:
            click.echo(f"  {item}")
    click.echo(f"Dependencies: {len(descriptor.dependencies)}")


def _generate(descriptor: ProjectDescriptor, output: str, catalog: Catalog) -> bool:
    """Write the recipe and the topology; each is attempted even if the other fails."""
    ok = True
    try:
        path = generate_dockerfile(descriptor, output, catalog)
        click.echo(f"  + {path}")
    except DockerizerError as e:
        click.echo(f"Error: failed to generate Dockerfile: {e}", err=True)
        ok = False

    try:
        result = generate_compose(descriptor, output, catalog)
    except DockerizerError as e:
        click.echo(f"Error: failed to generate docker-compose.yml: {e}", err=True)
        ok = False
    else:
        for path in result.files:
            click.echo(f"  + {path}")
        for warning in result.warnings:
            click.echo(f"Warning: {warning}", err=True)
    return ok


@click.group()
@click.version_option(__version__, prog_name="dockerize")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--catalog",
    "catalog_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Catalog directory (overrides DOCKERIZER_CATALOG_DIR)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, catalog_dir: str | None) -> None:
    """Dockerizer: generate Docker files from a project's manifests."""
    setup_logging("DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["catalog_dir"] = catalog_dir


@main.command("analyze")
@_source_option
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def analyze(ctx: click.Context, source: str, as_json: bool) -> None:
    """Detect language, version, framework and ports without writing anything."""
    catalog = _load_catalog(ctx)
    descriptor = _analyze(source, catalog)

    if as_json:
        click.echo(json.dumps(descriptor.to_dict(), indent=2))
    else:
        _print_descriptor(descriptor)

    if descriptor.manifest_error:
        _fail(descriptor.manifest_error)


@main.command("generate")
@_source_option
@_output_option
@click.option("--language", default=None, help="Override the detected language")
@click.option("--framework", default=None, help="Override the detected framework ('' for none)")
@click.option("--port", default=None, help="Primary application port")
@click.option("--database", default=None, help="Database kind (e.g. postgres, mysql, mongodb)")
@click.option("--database-port", default=None, help="Host port for the database service")
@click.pass_context
def generate(
    ctx: click.Context,
    source: str,
    output: str | None,
    language: str | None,
    framework: str | None,
    port: str | None,
    database: str | None,
    database_port: str | None,
) -> None:
    """Generate Dockerfile and docker-compose.yml without prompting."""
    catalog = _load_catalog(ctx)
    descriptor = _analyze(source, catalog)

    if descriptor.manifest_error and language is None:
        _fail(descriptor.manifest_error)

    try:
        apply_overrides(
            descriptor,
            catalog,
            language=language,
            framework=framework,
            port=port,
            database=database,
            database_port=database_port,
        )
    except DockerizerError as e:
        _fail(str(e))

    if not descriptor.detected:
        _fail(
            f"Could not detect the project language in {source}. "
            f"Pass --language (one of: {', '.join(catalog.language_names())})"
        )

    click.echo(f"Generating Docker files for {descriptor.language} "
               f"{descriptor.framework or '(no framework)'} ...")
    if not _generate(descriptor, output or source, catalog):
        sys.exit(1)


def _choose_language(descriptor: ProjectDescriptor, catalog: Catalog) -> None:
    language = click.prompt(
        "Select your project's language",
        type=click.Choice(catalog.language_names()),
    )
    apply_overrides(descriptor, catalog, language=language)


def _choose_framework(descriptor: ProjectDescriptor, catalog: Catalog) -> None:
    entry = catalog.language(descriptor.language)
    if entry is None or not entry.frameworks:
        return
    framework = click.prompt(
        "Select your project's framework",
        type=click.Choice([*entry.frameworks, _NO_FRAMEWORK]),
    )
    apply_overrides(
        descriptor, catalog, framework="" if framework == _NO_FRAMEWORK else framework
    )


def _choose_database(descriptor: ProjectDescriptor, catalog: Catalog) -> None:
    framework = catalog.framework(descriptor.language, descriptor.framework)
    allowed = framework.databases if framework else []
    options = [kind for kind in allowed if catalog.database(kind)] or list(catalog.databases)
    if not options:
        return
    suggested = FRAMEWORK_DATABASES.get(descriptor.framework)
    database = click.prompt(
        "Select database type",
        type=click.Choice(options),
        default=suggested if suggested in options else options[0],
    )
    apply_overrides(descriptor, catalog, database=database)

    engine = catalog.database(database)
    click.echo(f"Default port for {database} is {engine.port}")
    if click.confirm("Would you like to use a different port?", default=False):
        db_port = click.prompt("Enter database port number", type=click.IntRange(1, 65535))
        apply_overrides(descriptor, catalog, database_port=db_port)


@main.command("init")
@_source_option
@_output_option
@click.pass_context
def init(ctx: click.Context, source: str, output: str | None) -> None:
    """Review what was detected, adjust it interactively, then generate."""
    catalog = _load_catalog(ctx)
    click.echo("Analyzing project structure...")
    descriptor = _analyze(source, catalog)

    if descriptor.manifest_error:
        click.echo(f"Warning: {descriptor.manifest_error}", err=True)

    if not descriptor.detected:
        click.echo("Could not automatically detect the project language.")
        _choose_language(descriptor, catalog)
        _choose_framework(descriptor, catalog)
    else:
        click.echo(f"Detected {descriptor.language} project")
        if not click.confirm("Is this correct?", default=True):
            _choose_language(descriptor, catalog)
            _choose_framework(descriptor, catalog)
        elif not descriptor.framework:
            click.echo("Could not automatically detect the framework.")
            _choose_framework(descriptor, catalog)
        else:
            click.echo(f"Detected {descriptor.framework} framework")
            if not click.confirm("Is this correct?", default=True):
                _choose_framework(descriptor, catalog)

    if descriptor.primary_port:
        click.echo(
            f"Default port for {descriptor.framework or descriptor.language} "
            f"is {descriptor.primary_port}"
        )
        if click.confirm("Would you like to use a different port?", default=False):
            port = click.prompt("Enter port number", type=click.IntRange(1, 65535))
            apply_overrides(descriptor, catalog, port=port)

    name = descriptor.framework or descriptor.language
    if descriptor.framework in FRAMEWORK_DATABASES:
        click.echo(f"{name} projects get a database service; choose its engine.")
        _choose_database(descriptor, catalog)
    else:
        click.echo(f"No database service is generated for {name} projects.")

    log.debug("cli.init_choices", **descriptor.to_dict())
    click.echo("\nGenerating Docker files...")
    if not _generate(descriptor, output or source, catalog):
        sys.exit(1)

    click.echo("\nSuccessfully generated Docker files!")
    click.echo("\nNext steps:")
    click.echo("1. Review the generated files")
    click.echo("2. Build and run your containers:")
    click.echo("   docker-compose up --build")


@main.command("clean")
@click.option("-o", "--output", default=".", help="Directory holding the generated files")
def clean(output: str) -> None:
    """Remove generated Dockerfile, docker-compose.yml and proxy config."""
    try:
        removed = clean_generated(output)
    except DockerizerError as e:
        _fail(str(e))
    if not removed:
        click.echo("Nothing to clean.")
        return
    for path in removed:
        click.echo(f"  - {path}")


@main.command("supported")
@click.pass_context
def supported(ctx: click.Context) -> None:
    """List the languages, frameworks and databases in the catalog."""
    catalog = _load_catalog(ctx)
    for entry in catalog.languages:
        click.echo(f"{entry.name} ({', '.join(entry.indicators)}; default {entry.default_image})")
        for name, framework in entry.frameworks.items():
            port = f" :{framework.port}" if framework.port else ""
            click.echo(f"  {name}{port}")
    if catalog.databases:
        click.echo("Databases:")
        for kind, engine in catalog.databases.items():
            click.echo(f"  {kind} ({engine.image}, port {engine.port})")


if __name__ == "__main__":
    main()
