"""Reader for pip requirements.txt files."""

from __future__ import annotations

import re
from pathlib import Path

from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

# Matches: package_name at the start of a requirement line
_REQ_RE = re.compile(r"^([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)")


def normalize_name(name: str) -> str:
    """Normalize a Python package name per PEP 503."""
    return re.sub(r"[-_.]+", "-", name).lower()


class RequirementsTxtReader:
    ecosystem = "pip"
    indicators = ["requirements.txt"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        manifest = RawManifest(path=file_path)

        for raw_line in content.splitlines():
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue
            # -r includes, -e editables, --index-url and friends
            if line.startswith("-"):
                continue
            if "://" in line or line.startswith("git+"):
                continue

            m = _REQ_RE.match(line)
            if m:
                manifest.dependencies.add(normalize_name(m.group(1)))

        return manifest


register_reader(RequirementsTxtReader())
