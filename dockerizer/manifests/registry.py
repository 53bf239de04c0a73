"""Reader registry — match indicator filenames to manifest readers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from dockerizer.exceptions import ManifestUnreadable
from dockerizer.models import RawManifest


@runtime_checkable
class ManifestReader(Protocol):
    """Interface that every manifest reader must satisfy."""

    ecosystem: str
    indicators: list[str]

    def parse(self, file_path: Path, content: str) -> RawManifest:
        """Parse file content; raise :class:`ManifestUnreadable` on malformed input."""
        ...


READER_REGISTRY: dict[str, ManifestReader] = {}


def register_reader(reader: ManifestReader) -> None:
    """Register a reader instance for each of its indicator filenames."""
    for indicator in reader.indicators:
        READER_REGISTRY[indicator] = reader


def read_manifest(directory: str | Path, indicator: str) -> RawManifest:
    """Read and parse ``indicator`` inside ``directory``.

    Raises :class:`ManifestUnreadable` when no reader handles the filename,
    the file is absent, or its content cannot be parsed.
    """
    file_path = Path(directory) / indicator
    reader = READER_REGISTRY.get(indicator)
    if reader is None:
        raise ManifestUnreadable(str(file_path), "no reader registered for this file")
    try:
        content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestUnreadable(str(file_path), "file does not exist") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnreadable(str(file_path), str(e)) from e
    return reader.parse(file_path, content)
