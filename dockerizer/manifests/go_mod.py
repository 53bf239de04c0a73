"""Reader for Go go.mod files."""

from __future__ import annotations

import re
from pathlib import Path

from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

# Single require: require github.com/foo/bar v1.2.3
_SINGLE_RE = re.compile(r"^require\s+(\S+)\s+(\S+)")

# Inside require block: github.com/foo/bar v1.2.3
_BLOCK_RE = re.compile(r"^(\S+)\s+(v\S+)")

# Toolchain directive: go 1.21 / go 1.21.5
_GO_DIRECTIVE_RE = re.compile(r"^go\s+(\S+)")


class GoModReader:
    ecosystem = "go"
    indicators = ["go.mod"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        manifest = RawManifest(path=file_path)
        in_require_block = False

        for raw_line in content.splitlines():
            line = raw_line.split("//", 1)[0].strip()
            if not line:
                continue

            if line.startswith("require ("):
                in_require_block = True
                continue
            if in_require_block and line == ")":
                in_require_block = False
                continue

            if in_require_block:
                m = _BLOCK_RE.match(line)
            else:
                m = _SINGLE_RE.match(line)
                if m is None:
                    directive = _GO_DIRECTIVE_RE.match(line)
                    if directive:
                        manifest.hints["engine"] = directive.group(1)
                    continue
            if m:
                manifest.dependencies.add(m.group(1))

        return manifest


register_reader(GoModReader())
