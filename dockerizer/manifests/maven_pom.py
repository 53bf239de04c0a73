"""Reader for Maven pom.xml files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from dockerizer.exceptions import ManifestUnreadable
from dockerizer.manifests.registry import register_reader
from dockerizer.models import RawManifest

_NS = "{http://maven.apache.org/POM/4.0.0}"

# Properties that pin the Java release, most specific first
_VERSION_PROPERTIES = ("java.version", "maven.compiler.release", "maven.compiler.source")


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


class MavenPomReader:
    ecosystem = "maven"
    indicators = ["pom.xml"]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise ManifestUnreadable(str(file_path), f"invalid XML: {e}") from e

        manifest = RawManifest(path=file_path)

        # Try both namespaced and non-namespaced
        for ns in (_NS, ""):
            for tag in ("dependency", "parent", "plugin"):
                for el in root.iter(f"{ns}{tag}"):
                    artifact_id = _text(el.find(f"{ns}artifactId"))
                    if not artifact_id:
                        continue
                    group_id = _text(el.find(f"{ns}groupId"))
                    name = f"{group_id}:{artifact_id}" if group_id else artifact_id
                    manifest.dependencies.add(name)

        props = self._extract_properties(root)
        for key in _VERSION_PROPERTIES:
            if key in props:
                manifest.hints["engine"] = props[key]
                break
        return manifest

    @staticmethod
    def _extract_properties(root: ET.Element) -> dict[str, str]:
        """Extract <properties> key-value pairs from the POM root."""
        props: dict[str, str] = {}
        for ns in (_NS, ""):
            props_el = root.find(f"{ns}properties")
            if props_el is not None:
                for child in props_el:
                    # Strip namespace from tag name
                    tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
                    if child.text:
                        props[tag] = child.text.strip()
        return props


register_reader(MavenPomReader())
