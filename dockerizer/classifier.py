"""Framework classification. The first catalog framework whose markers match wins."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

from dockerizer.catalog import FrameworkEntry
from dockerizer.manifests.requirements_txt import normalize_name

log = structlog.get_logger("dockerizer.classifier")

# A marker also matches dependencies that extend it by one of these separators:
# "github.com/gofiber/fiber" ~ "github.com/gofiber/fiber/v2",
# "laravel" ~ "laravel/framework",
# "org.springframework.boot" ~ "org.springframework.boot:spring-boot-starter-web"
_SEGMENT_SEPARATORS = ("/", ":")


@dataclass
class FrameworkMatch:
    name: str
    entry: FrameworkEntry
    marker: str
    dependency: str


def marker_matches(marker: str, dependency: str) -> bool:
    marker = marker.lower()
    dependency = dependency.lower()
    if dependency == marker or normalize_name(dependency) == normalize_name(marker):
        return True
    return any(dependency.startswith(marker + sep) for sep in _SEGMENT_SEPARATORS)


def classify(
    dependencies: Iterable[str],
    frameworks: Mapping[str, FrameworkEntry],
) -> FrameworkMatch | None:
    """Return the first framework (in catalog order) whose markers hit ``dependencies``.

    Projects depending on several frameworks' markers get whichever comes
    first in the catalog; there is no ranking.
    """
    deps = sorted(set(dependencies))
    for name, entry in frameworks.items():
        for marker in entry.markers:
            for dep in deps:
                if marker_matches(marker, dep):
                    log.debug("classifier.matched", framework=name, marker=marker, dependency=dep)
                    return FrameworkMatch(name=name, entry=entry, marker=marker, dependency=dep)
    return None
