"""Shared pytest fixtures for dockerizer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockerizer.catalog import Catalog, load_catalog
from dockerizer.core.config import PACKAGED_CATALOG_DIR


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DOCKERIZER_CATALOG_DIR", "DOCKERIZER_LOG_LEVEL", "DOCKERIZER_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    return load_catalog(PACKAGED_CATALOG_DIR)


@pytest.fixture
def make_project(tmp_path: Path):
    """Write ``{relative_path: content}`` into a fresh project directory."""

    def _make(files: dict[str, str], name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir()
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return root

    return _make
