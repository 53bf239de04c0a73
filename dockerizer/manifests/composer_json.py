"""Reader for PHP composer.json files."""

from __future__ import annotations

import json
from pathlib import Path

from dockerizer.exceptions import ManifestUnreadable
from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

_DEP_SECTIONS = ("require", "require-dev")


def _is_platform_package(name: str) -> bool:
    """php, ext-* and lib-* describe the runtime, not installable packages."""
    return name == "php" or name.startswith(("ext-", "lib-"))


class ComposerJsonReader:
    ecosystem = "composer"
    indicators = ["composer.json"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ManifestUnreadable(str(file_path), f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ManifestUnreadable(str(file_path), "top-level value must be an object")

        manifest = RawManifest(path=file_path)
        for section in _DEP_SECTIONS:
            deps = data.get(section) or {}
            if not isinstance(deps, dict):
                raise ManifestUnreadable(str(file_path), f'"{section}" must be an object')
            for name in deps:
                if not _is_platform_package(name):
                    manifest.dependencies.add(name.lower())

        php = (data.get("require") or {}).get("php")
        if isinstance(php, str):
            manifest.hints["engine"] = php

        config = data.get("config") or {}
        platform = config.get("platform") if isinstance(config, dict) else None
        if isinstance(platform, dict) and isinstance(platform.get("php"), str):
            manifest.hints["platform"] = platform["php"]
        return manifest


register_reader(ComposerJsonReader())
