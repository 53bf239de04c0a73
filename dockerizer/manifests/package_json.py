"""Reader for Node.js package.json files."""

from __future__ import annotations

import json
from pathlib import Path

from dockerizer.exceptions import ManifestUnreadable
from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

_DEP_SECTIONS = ("dependencies", "devDependencies")


class PackageJsonReader:
    ecosystem = "npm"
    indicators = ["package.json"]

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
            if isinstance(deps, dict):
                manifest.dependencies.update(deps)

        engines = data.get("engines") or {}
        if isinstance(engines, dict) and isinstance(engines.get("node"), str):
            manifest.hints["engine"] = engines["node"]
        return manifest


register_reader(PackageJsonReader())
