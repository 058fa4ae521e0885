"""Planning defaults read from the environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from packplanner.domain.titles import DEFAULT_NAMESPACES

from .env import optional_env_var
from .errors import ConfigurationError

NAMESPACES_ENV: Final[str] = "PACKPLANNER_NAMESPACES"
GLOBAL_PREFIX_ENV: Final[str] = "PACKPLANNER_GLOBAL_PREFIX"
LOG_LEVEL_ENV: Final[str] = "PACKPLANNER_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    namespaces: tuple[str, ...] = DEFAULT_NAMESPACES
    default_global_prefix: str | None = None
    log_level: int = logging.INFO


def _parse_namespaces(raw: str) -> tuple[str, ...]:
    names = tuple(dict.fromkeys(part.strip() for part in raw.split(",") if part.strip()))
    if not names:
        raise ConfigurationError(
            f"{NAMESPACES_ENV} must list at least one namespace", variable=NAMESPACES_ENV
        )
    for name in names:
        if ":" in name:
            raise ConfigurationError(
                f"Namespace names must not contain ':' ({name!r})", variable=NAMESPACES_ENV
            )
    return names


def _parse_log_level(raw: str) -> int:
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(
            f"Unknown log level in {LOG_LEVEL_ENV}: {raw}", variable=LOG_LEVEL_ENV
        )
    return level


def get_planner_config() -> PlannerConfig:
    namespaces = optional_env_var(NAMESPACES_ENV)
    log_level = optional_env_var(LOG_LEVEL_ENV)
    return PlannerConfig(
        namespaces=_parse_namespaces(namespaces) if namespaces else DEFAULT_NAMESPACES,
        default_global_prefix=optional_env_var(GLOBAL_PREFIX_ENV),
        log_level=_parse_log_level(log_level) if log_level else logging.INFO,
    )
