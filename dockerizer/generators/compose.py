"""docker-compose.yml generation — app service plus optional database, cache and proxy."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog
import yaml

from dockerizer.catalog import Catalog, DatabaseEntry, load_catalog
from dockerizer.generators.output import COMPOSE_FILE, DOCKERFILE, PROXY_CONF_DIR, write_output
from dockerizer.generators.proxy import generate_proxy_config
from dockerizer.models import ProjectDescriptor

log = structlog.get_logger("dockerizer.compose")

COMPOSE_VERSION = "3.8"
NETWORK = "app-network"
RESTART_POLICY = "unless-stopped"

# Frameworks that get a database service, and which engine by default
FRAMEWORK_DATABASES: dict[str, str] = {
    "django": "postgres",
    "flask": "postgres",
    "fastapi": "postgres",
    "rails": "postgres",
    "laravel": "mysql",
    "symfony": "mysql",
    "express": "mongodb",
    "nestjs": "mongodb",
}

# Frameworks that get a redis cache service
CACHE_FRAMEWORKS: frozenset[str] = frozenset({"laravel", "rails", "django", "nestjs"})
CACHE_ENGINE = "redis"

# Frameworks served through an nginx reverse proxy (PHP-FPM upstream)
PROXY_FRAMEWORKS: frozenset[str] = frozenset({"laravel"})

HEALTHCHECK_INTERVAL = "10s"
HEALTHCHECK_TIMEOUT = "5s"
HEALTHCHECK_RETRIES = 5


@dataclass
class TopologyResult:
    document: dict
    warnings: list[str] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)


def select_database(descriptor: ProjectDescriptor, warnings: list[str]) -> str | None:
    """Pick the database engine for the project's framework.

    Frameworks in :data:`FRAMEWORK_DATABASES` always get a database; an
    explicit ``descriptor.database`` only chooses the engine. Requests for
    frameworks outside the table are dropped with a warning.
    """
    default = FRAMEWORK_DATABASES.get(descriptor.framework)
    if default is None:
        if descriptor.database:
            message = (
                f"Database '{descriptor.database}' was requested but framework "
                f"'{descriptor.framework or '(none)'}' has no database mapping; "
                "no database service was added"
            )
            log.warning(
                "compose.database_skipped",
                database=descriptor.database,
                framework=descriptor.framework or None,
            )
            warnings.append(message)
        return None
    return descriptor.database or default


def _backing_service(kind: str, engine: DatabaseEntry, host_port: str | int) -> dict:
    return {
        "image": engine.image,
        **({"environment": list(engine.environment)} if engine.environment else {}),
        "ports": [f"{host_port}:{engine.port}"],
        "volumes": [f"{kind}-data:{engine.data_path}"],
        "networks": [NETWORK],
        "healthcheck": {
            "test": list(engine.healthcheck),
            "interval": HEALTHCHECK_INTERVAL,
            "timeout": HEALTHCHECK_TIMEOUT,
            "retries": HEALTHCHECK_RETRIES,
        },
        "restart": RESTART_POLICY,
    }


def build_compose(descriptor: ProjectDescriptor, catalog: Catalog | None = None) -> TopologyResult:
    """Build the compose document for ``descriptor`` without touching the filesystem."""
    catalog = catalog or load_catalog()
    result = TopologyResult(document={})
    services: dict[str, dict] = {}
    volumes: dict[str, dict] = {}

    app: dict = {"build": {"context": ".", "dockerfile": DOCKERFILE}}
    if descriptor.framework in PROXY_FRAMEWORKS:
        app["volumes"] = [".:/var/www/html"]
    elif descriptor.ports:
        app["ports"] = list(descriptor.ports)
    app["env_file"] = [".env"]
    app["networks"] = [NETWORK]
    app["restart"] = RESTART_POLICY
    services["app"] = app

    if descriptor.framework in PROXY_FRAMEWORKS:
        services["nginx"] = {
            "image": "nginx:alpine",
            "ports": [f"{descriptor.primary_port or 80}:80"],
            "volumes": [".:/var/www/html", f"./{PROXY_CONF_DIR.as_posix()}:/etc/nginx/conf.d"],
            "networks": [NETWORK],
            "depends_on": ["app"],
            "restart": RESTART_POLICY,
        }

    depends_on: list[str] = []

    kind = select_database(descriptor, result.warnings)
    if kind is not None:
        engine = catalog.database(kind)
        if engine is None:
            message = (
                f"Database '{kind}' is not in the database catalog; "
                "no database service was added"
            )
            log.warning("compose.database_unknown", database=kind)
            result.warnings.append(message)
        else:
            services[kind] = _backing_service(kind, engine, descriptor.database_port or engine.port)
            volumes[f"{kind}-data"] = {"driver": "local"}
            depends_on.append(kind)
            log.debug("compose.database_added", database=kind, framework=descriptor.framework)

    if descriptor.framework in CACHE_FRAMEWORKS:
        cache = catalog.caches.get(CACHE_ENGINE)
        if cache is None:
            log.warning("compose.cache_unknown", cache=CACHE_ENGINE)
            result.warnings.append(
                f"Cache '{CACHE_ENGINE}' is not in the catalog; no cache service was added"
            )
        else:
            services[CACHE_ENGINE] = _backing_service(CACHE_ENGINE, cache, cache.port)
            volumes[f"{CACHE_ENGINE}-data"] = {"driver": "local"}
            depends_on.append(CACHE_ENGINE)

    if depends_on:
        app["depends_on"] = depends_on

    document: dict = {
        "version": COMPOSE_VERSION,
        "services": services,
        "networks": {NETWORK: {"driver": "bridge"}},
    }
    if volumes:
        document["volumes"] = volumes
    result.document = document
    return result


def render_compose(document: dict) -> str:
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def generate_compose(
    descriptor: ProjectDescriptor,
    output_dir: str | Path = ".",
    catalog: Catalog | None = None,
) -> TopologyResult:
    """Write ``docker-compose.yml`` (and the proxy config when needed) into ``output_dir``."""
    result = build_compose(descriptor, catalog)
    root = Path(output_dir)

    if descriptor.framework in PROXY_FRAMEWORKS:
        result.files.append(generate_proxy_config(root))

    path = write_output(root / COMPOSE_FILE, render_compose(result.document))
    result.files.append(path)
    log.info(
        "compose.written",
        path=str(path),
        services=list(result.document["services"]),
    )
    return result
