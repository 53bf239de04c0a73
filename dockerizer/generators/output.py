"""Writing and cleaning generated files."""

from __future__ import annotations

from pathlib import Path

import structlog

from dockerizer.exceptions import OutputWriteFailure

log = structlog.get_logger("dockerizer.output")

DOCKERFILE = "Dockerfile"
COMPOSE_FILE = "docker-compose.yml"
PROXY_CONF_DIR = Path("docker") / "nginx" / "conf.d"
PROXY_CONF_FILE = PROXY_CONF_DIR / "default.conf"

GENERATED_FILES: tuple[Path, ...] = (Path(DOCKERFILE), Path(COMPOSE_FILE), PROXY_CONF_FILE)


def write_output(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``; a partially written file is removed on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("w", encoding="utf-8")
    except OSError as e:
        raise OutputWriteFailure(str(path), e) from e
    try:
        with handle:
            handle.write(content)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise OutputWriteFailure(str(path), e) from e
    log.info("output.written", path=str(path), size=len(content))
    return path


def clean_generated(output_dir: str | Path = ".") -> list[Path]:
    """Remove previously generated files under ``output_dir``.

    Missing files are skipped, so cleaning twice is a no-op. The proxy config
    directories are removed only when they end up empty.
    """
    root = Path(output_dir)
    removed: list[Path] = []
    for rel in GENERATED_FILES:
        target = root / rel
        if target.is_file():
            try:
                target.unlink()
            except OSError as e:
                raise OutputWriteFailure(str(target), e) from e
            removed.append(target)
            log.info("output.removed", path=str(target))

    # docker/nginx/conf.d -> docker/nginx -> docker, innermost first
    for rel in (PROXY_CONF_DIR, *PROXY_CONF_DIR.parents):
        if rel == Path("."):
            continue
        directory = root / rel
        if directory.is_dir() and not any(directory.iterdir()):
            directory.rmdir()
    return removed
