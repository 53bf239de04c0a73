"""Data models for project detection results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path

from dockerizer.exceptions import InvalidPort


def validate_port(value: str | int) -> str:
    """Return ``value`` as a decimal port string, or raise :class:`InvalidPort`."""
    try:
        port = int(str(value).strip())
    except ValueError:
        raise InvalidPort(value) from None
    if port < 1 or port > 65535:
        raise InvalidPort(value)
    return str(port)


@dataclass
class RawManifest:
    """Dependencies and version hints parsed from one manifest file."""

    path: Path
    dependencies: set[str] = field(default_factory=set)
    hints: dict[str, str] = field(default_factory=dict)  # {"engine": ">=18", "platform": "8.2"}


@dataclass
class ProjectDescriptor:
    """Normalized summary of a detected project, consumed by both generators."""

    language: str = ""  # "" = undetected
    framework: str = ""  # "" = undetected or no framework matched
    base_image: str = ""
    version: str = ""
    manifest: str = ""  # indicator file that committed the language
    dependencies: set[str] = field(default_factory=set)
    ports: list[str] = field(default_factory=list)  # ports[0] is the primary port
    database: str = ""
    database_port: str = ""
    environment: list[str] = field(default_factory=list)  # ["KEY=value", ...]
    manifest_error: str | None = None

    @property
    def detected(self) -> bool:
        return self.language != ""

    @property
    def primary_port(self) -> str | None:
        return self.ports[0] if self.ports else None

    def set_primary_port(self, value: str | int) -> None:
        port = validate_port(value)
        if self.ports:
            self.ports[0] = port
        else:
            self.ports.append(port)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["dependencies"] = sorted(self.dependencies)
        return data
