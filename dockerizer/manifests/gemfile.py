"""Reader for Ruby Gemfiles."""

from __future__ import annotations

import re
from pathlib import Path

from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

# gem "rails", "~> 7.1"  /  gem 'puma'
_GEM_RE = re.compile(r"""^gem\s*\(?\s*["']([A-Za-z0-9._-]+)["']""")

# ruby "3.2.2"  /  ruby '~> 3.1'
_RUBY_RE = re.compile(r"""^ruby\s*\(?\s*["']([^"']+)["']""")


class GemfileReader:
    ecosystem = "bundler"
    indicators = ["Gemfile"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        manifest = RawManifest(path=file_path)

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            m = _GEM_RE.match(line)
            if m:
                manifest.dependencies.add(m.group(1).lower())
                continue
            ruby = _RUBY_RE.match(line)
            if ruby:
                manifest.hints["engine"] = ruby.group(1)

        return manifest


register_reader(GemfileReader())
