"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_ENV_CATALOG_DIR = "DOCKERIZER_CATALOG_DIR"
_ENV_LOG_LEVEL = "DOCKERIZER_LOG_LEVEL"
_ENV_LOG_FORMAT = "DOCKERIZER_LOG_FORMAT"

PACKAGED_CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalogs"


@dataclass
class Settings:
    catalog_dir: Path
    log_level: str = "WARNING"
    log_format: str = "console"  # console | json

    @classmethod
    def from_env(cls) -> Settings:
        catalog_dir = os.environ.get(_ENV_CATALOG_DIR)
        return cls(
            catalog_dir=Path(catalog_dir) if catalog_dir else PACKAGED_CATALOG_DIR,
            log_level=os.environ.get(_ENV_LOG_LEVEL, "WARNING").upper(),
            log_format=os.environ.get(_ENV_LOG_FORMAT, "console").lower(),
        )
