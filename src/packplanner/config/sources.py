"""Locations of the files the CLI reads when no path is given."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var, require_env_vars

CATALOG_ENV: Final[str] = "PACKPLANNER_CATALOG"
INSTALLED_ENV: Final[str] = "PACKPLANNER_INSTALLED"


@dataclass(frozen=True, slots=True)
class SourceConfig:
    catalog_path: Path
    installed_path: Path | None = None


def get_source_config(
    *,
    catalog_path: Path | None = None,
    installed_path: Path | None = None,
) -> SourceConfig:
    """Combine explicit paths with environment fallbacks.

    The catalog is mandatory; the installed-state file is optional and an
    absent one means an empty wiki.
    """

    if catalog_path is None:
        catalog_path = Path(require_env_vars([CATALOG_ENV])[CATALOG_ENV]).expanduser()
    if installed_path is None:
        env_installed = optional_env_var(INSTALLED_ENV)
        installed_path = Path(env_installed).expanduser() if env_installed else None
    return SourceConfig(catalog_path=catalog_path, installed_path=installed_path)
