"""Reader for Gradle build files (build.gradle / build.gradle.kts).

Collects dependencies declared with standard Gradle configurations and the
ids of applied plugins, so ``id 'org.springframework.boot'`` counts as a
dependency marker just like a starter artifact does.
"""

from __future__ import annotations

import re
from pathlib import Path

from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

_CONFIGS = (
    r"(?:implementation|api|compileOnly|runtimeOnly|annotationProcessor|"
    r"testImplementation|testCompileOnly|testRuntimeOnly|developmentOnly|"
    r"compile|runtime|\w+Implementation)"
)

# configuration("group:artifact:version") or configuration "group:artifact"
_DEP_RE = re.compile(
    rf"\b{_CONFIGS}"
    r"\s*\(?\s*"
    r"""["']"""
    r"([A-Za-z0-9._-]+)"  # group
    r":"
    r"([A-Za-z0-9._-]+)"  # artifact
)

# id 'org.springframework.boot' version '3.2.0'  /  id("org.springframework.boot")
_PLUGIN_RE = re.compile(r"""\bid\s*\(?\s*["']([A-Za-z0-9._-]+)["']""")

# sourceCompatibility = '17' / JavaVersion.VERSION_17 / JavaLanguageVersion.of(21)
_SOURCE_COMPAT_RE = re.compile(
    r"""sourceCompatibility\s*=\s*(?:["']|JavaVersion\.VERSION_)(\d+(?:[._]\d+)?)"""
)
_TOOLCHAIN_RE = re.compile(r"JavaLanguageVersion\.of\(\s*(\d+)\s*\)")


class GradleBuildReader:
    ecosystem = "gradle"
    indicators = ["build.gradle", "build.gradle.kts"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        manifest = RawManifest(path=file_path)

        for m in _DEP_RE.finditer(content):
            manifest.dependencies.add(f"{m.group(1)}:{m.group(2)}")
        for m in _PLUGIN_RE.finditer(content):
            manifest.dependencies.add(m.group(1))

        version = _TOOLCHAIN_RE.search(content) or _SOURCE_COMPAT_RE.search(content)
        if version:
            manifest.hints["engine"] = version.group(1).replace("_", ".")
        return manifest


register_reader(GradleBuildReader())
